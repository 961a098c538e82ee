"""
tests/test_workflow_dispatcher.py

Routine resolution and browser session lifecycle.
"""

from __future__ import annotations

import asyncio
import unittest

from helpers import PDF_BYTES, FakeSessionProvider, make_job

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import Statement, StatementFile
from statement_fetcher.workflows.base import BrowserSession, CarrierWorkflow
from statement_fetcher.workflows.dispatcher import WorkflowDispatcher
from statement_fetcher.workflows.identifier import UNKNOWN_CARRIER
from statement_fetcher.workflows.registry import WorkflowRegistry


class _StaticWorkflow(CarrierWorkflow):
    slug = "net_static"

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        return [StatementFile(statement_date="2025-02-01", content=PDF_BYTES)]


class _CrashingWorkflow(CarrierWorkflow):
    slug = "net_crashing"

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        raise RuntimeError("Login failed: bad password")


class _EscapingWorkflow(CarrierWorkflow):
    slug = "net_escaping"

    async def run(self, session, job):  # type: ignore[override]
        raise RuntimeError("page crashed")

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        return []


class _MalformedWorkflow(CarrierWorkflow):
    slug = "net_malformed"

    async def run(self, session, job):  # type: ignore[override]
        return {"success": True}

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        return []


def _dispatcher(provider: FakeSessionProvider) -> WorkflowDispatcher:
    registry = WorkflowRegistry(
        {
            "net_static": _StaticWorkflow,
            "net_crashing": _CrashingWorkflow,
            "net_escaping": _EscapingWorkflow,
            "net_malformed": _MalformedWorkflow,
        },
        include_builtins=False,
    )
    return WorkflowDispatcher(registry=registry, session_provider=provider)


class TestWorkflowDispatcher(unittest.TestCase):
    def test_unknown_carrier_never_acquires_a_session(self) -> None:
        provider = FakeSessionProvider()
        job = make_job(login_url="https://portal.example.org/login")

        result = asyncio.run(_dispatcher(provider).dispatch(UNKNOWN_CARRIER, job))

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Unknown carrier for URL: https://portal.example.org/login")
        self.assertEqual(provider.acquired, 0)
        self.assertEqual(provider.released, 0)

    def test_successful_routine_returns_statements_and_releases(self) -> None:
        provider = FakeSessionProvider()

        result = asyncio.run(_dispatcher(provider).dispatch("net_static", make_job()))

        self.assertTrue(result.success)
        self.assertEqual(len(result.statements), 1)
        self.assertEqual((provider.acquired, provider.released), (1, 1))

    def test_routine_error_becomes_failed_result(self) -> None:
        provider = FakeSessionProvider()

        result = asyncio.run(_dispatcher(provider).dispatch("net_crashing", make_job()))

        self.assertFalse(result.success)
        self.assertEqual(result.statements, [])
        self.assertEqual(result.error, "Login failed: bad password")
        self.assertEqual(provider.released, 1)

    def test_exception_escaping_run_is_wrapped_and_session_released(self) -> None:
        provider = FakeSessionProvider()

        result = asyncio.run(_dispatcher(provider).dispatch("net_escaping", make_job()))

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Failed to execute workflow: page crashed")
        self.assertEqual(provider.released, 1)

    def test_unregistered_slug_releases_session(self) -> None:
        provider = FakeSessionProvider()

        result = asyncio.run(_dispatcher(provider).dispatch("com_nobody", make_job()))

        self.assertFalse(result.success)
        self.assertEqual(result.error, "No workflow implemented for carrier: com_nobody")
        self.assertEqual((provider.acquired, provider.released), (1, 1))

    def test_non_result_return_is_normalised(self) -> None:
        provider = FakeSessionProvider()

        result = asyncio.run(_dispatcher(provider).dispatch("net_malformed", make_job()))

        self.assertFalse(result.success)
        self.assertIn("routine returned dict", result.error or "")

    def test_acquire_failure_is_reported_without_release(self) -> None:
        provider = FakeSessionProvider(fail_acquire=True)

        result = asyncio.run(_dispatcher(provider).dispatch("net_static", make_job()))

        self.assertFalse(result.success)
        self.assertEqual(
            result.error,
            "Failed to execute workflow: Browserbase session limit reached",
        )
        self.assertEqual(provider.released, 0)

    def test_cancellation_still_releases_session(self) -> None:
        class _SlowWorkflow(CarrierWorkflow):
            slug = "net_slow"

            async def fetch_statements(self, session, job):  # type: ignore[override]
                await asyncio.sleep(5)
                return []

        provider = FakeSessionProvider()
        registry = WorkflowRegistry({"net_slow": _SlowWorkflow}, include_builtins=False)
        dispatcher = WorkflowDispatcher(registry=registry, session_provider=provider)

        async def _run() -> None:
            with self.assertRaises(asyncio.TimeoutError):
                await asyncio.wait_for(dispatcher.dispatch("net_slow", make_job()), timeout=0.05)

        asyncio.run(_run())
        self.assertEqual((provider.acquired, provider.released), (1, 1))


class TestWorkflowRegistry(unittest.TestCase):
    def test_resolve_returns_fresh_instances(self) -> None:
        registry = WorkflowRegistry()
        first = registry.resolve("net_abacus")
        second = registry.resolve("net_abacus")
        self.assertIsNotNone(first)
        self.assertIsNot(first, second)

    def test_register_new_carrier(self) -> None:
        registry = WorkflowRegistry(include_builtins=False)
        registry.register(slug="net_static", workflow_class=_StaticWorkflow)
        self.assertEqual(registry.slugs(), ["net_static"])
        self.assertIsInstance(registry.resolve("net_static"), _StaticWorkflow)

    def test_register_rejects_non_workflows(self) -> None:
        registry = WorkflowRegistry(include_builtins=False)
        with self.assertRaises(ValueError):
            registry.register(slug="net_bad", workflow_class=dict)  # type: ignore[arg-type]

    def test_resolve_passes_capture_timeout(self) -> None:
        registry = WorkflowRegistry(capture_timeout_seconds=3.5)
        workflow = registry.resolve("com_ufginsurance")
        self.assertEqual(workflow.capture_timeout_seconds, 3.5)  # type: ignore[union-attr]


if __name__ == "__main__":
    unittest.main()
