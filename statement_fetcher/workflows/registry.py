"""
Carrier workflow registry.
"""

from __future__ import annotations

from collections.abc import Mapping

from statement_fetcher.workflows.base import CarrierWorkflow
from statement_fetcher.workflows.carriers import BUILTIN_WORKFLOWS


class WorkflowRegistry:
    """
    Explicit slug -> workflow class table.

    New carriers are added by registering a class under a new slug; the
    dispatcher never changes.
    """

    def __init__(
        self,
        registrations: Mapping[str, type[CarrierWorkflow]] | None = None,
        *,
        include_builtins: bool = True,
        capture_timeout_seconds: float = 10.0,
    ) -> None:
        table: dict[str, type[CarrierWorkflow]] = dict(BUILTIN_WORKFLOWS) if include_builtins else {}
        if registrations:
            table.update({slug.strip().lower(): cls for slug, cls in registrations.items()})
        self._registrations = table
        self._capture_timeout_seconds = capture_timeout_seconds

    def register(self, *, slug: str, workflow_class: type[CarrierWorkflow]) -> None:
        if not isinstance(workflow_class, type) or not issubclass(workflow_class, CarrierWorkflow):
            raise ValueError(f"Workflow for '{slug}' must inherit from CarrierWorkflow.")
        self._registrations[slug.strip().lower()] = workflow_class

    def slugs(self) -> list[str]:
        return sorted(self._registrations)

    def resolve(self, slug: str) -> CarrierWorkflow | None:
        """
        Return a fresh routine instance for `slug`, or None when unregistered.
        """

        workflow_class = self._registrations.get(slug)
        if workflow_class is None:
            return None
        return workflow_class(capture_timeout_seconds=self._capture_timeout_seconds)
