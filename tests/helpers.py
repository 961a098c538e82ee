"""
Fakes shared across test modules.
"""

from __future__ import annotations

import time
from datetime import date
from typing import Any

from statement_fetcher.domain.jobs import Credential, StatementJob
from statement_fetcher.domain.statements import Attachment

PDF_BYTES = b"%PDF-1.7\n%test statement\n"
HTML_BYTES = b"<!DOCTYPE html><html><body>Login</body></html>"


def make_job(
    login_url: str = "https://portal.abacus.net/login",
    period_start: date = date(2025, 1, 1),
    job_id: str = "job-1",
) -> StatementJob:
    return StatementJob(
        job_id=job_id,
        credential=Credential(username="agent@example.com", password="s3cret", login_url=login_url),
        accounting_period_start_date=period_start,
    )


class FakeDownloader:
    def __init__(self, responses: dict[str, bytes] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[str] = []

    def download(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.responses:
            raise RuntimeError(f"HTTP 404 for {url}")
        return self.responses[url]


class FakeStorage:
    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = fail_for or set()
        self.uploads: list[dict[str, Any]] = []

    def upload(
        self,
        content: bytes,
        *,
        carrier_slug: str,
        filename: str,
        metadata: dict[str, str] | None = None,
    ) -> Attachment:
        if filename in self.fail_for:
            raise RuntimeError(f"upload rejected for {filename}")
        self.uploads.append(
            {"content": content, "carrier_slug": carrier_slug, "filename": filename, "metadata": metadata}
        )
        stem = filename.rsplit(".", 1)[0]
        return Attachment(
            public_id=f"supplier_statements/{carrier_slug}/{stem}",
            format=filename.rsplit(".", 1)[-1],
            url=f"https://res.example.test/{carrier_slug}/{filename}",
            title=filename,
            etag=f"etag-{stem}",
        )


class FakeAdminAPI:
    def __init__(self, fail_status: bool = False, inbox_delay: float = 0.0) -> None:
        self.fail_status = fail_status
        self.inbox_delay = inbox_delay
        self.inbox_calls: list[tuple[str, list[Attachment]]] = []
        self.status_calls: list[tuple[str, Any]] = []

    def create_inbox_entries(self, job_id: str, attachments: list[Attachment]) -> list[str]:
        if self.inbox_delay:
            time.sleep(self.inbox_delay)
        self.inbox_calls.append((job_id, list(attachments)))
        return [f"inbox-{index}" for index, _ in enumerate(attachments, start=1)]

    def update_job_status(self, job_id: str, update: Any) -> None:
        self.status_calls.append((job_id, update))
        if self.fail_status:
            raise RuntimeError("Admin API unreachable")


class FakeResponse:
    def __init__(self, url: str, headers: dict[str, str] | None = None) -> None:
        self.url = url
        self.headers = headers or {}


class FakeAPIResponse:
    def __init__(self, body: bytes = b"", status: int = 200, status_text: str = "OK") -> None:
        self._body = body
        self.status = status
        self.status_text = status_text
        self.ok = 200 <= status < 300

    async def body(self) -> bytes:
        return self._body


class FakeRoute:
    """Intercepted request whose fetched body is `body`; `fail` makes the fetch raise."""

    def __init__(self, url: str, body: bytes = b"", fail: bool = False) -> None:
        self.request = FakeResponse(url)
        self.body = body
        self.fail = fail
        self.fulfilled = False
        self.continued = False

    async def fetch(self) -> FakeAPIResponse:
        if self.fail:
            raise RuntimeError("route fetch aborted")
        return FakeAPIResponse(self.body)

    async def fulfill(self, response: Any = None) -> None:
        self.fulfilled = True

    async def continue_(self) -> None:
        self.continued = True


class FakeDownload:
    def __init__(self, path: str, suggested_filename: str, failure: str | None = None) -> None:
        self._path = path
        self.suggested_filename = suggested_filename
        self._failure = failure

    async def failure(self) -> str | None:
        return self._failure

    async def path(self) -> str:
        return self._path


class _DownloadInfo:
    def __init__(self, download: FakeDownload) -> None:
        self._download = download

    @property
    def value(self) -> Any:
        async def _resolve() -> FakeDownload:
            return self._download

        return _resolve()


class _ExpectDownload:
    def __init__(self, download: FakeDownload) -> None:
        self._info = _DownloadInfo(download)

    async def __aenter__(self) -> _DownloadInfo:
        return self._info

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self.page = page
        self.selector = selector

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self.page, f"{self.selector} >> {selector}")

    async def evaluate(self, script: str) -> Any:
        return self.page.evaluate_results.get(self.selector)

    async def click(self) -> None:
        await self.page.click(self.selector)

    async def all_text_contents(self) -> list[str]:
        return list(self.page.option_labels)

    async def select_option(self, label: str | None = None) -> None:
        self.page.selected_options.append(label)


class _FakeRequestContext:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    async def post(self, url: str, form: dict[str, str] | None = None) -> FakeAPIResponse:
        self._page.posted.append((url, dict(form or {})))
        return self._page.post_response


class FakeContext:
    def __init__(self, pages: list[Any]) -> None:
        self.pages = pages


class FakePage:
    """
    Scripted Playwright page.

    Navigations emit `navigation_responses[url]` to response listeners and
    clicks on a selector in `click_routes` run the registered route handlers.
    """

    def __init__(
        self,
        *,
        url: str = "https://portal.test/home",
        evaluate_results: dict[str, Any] | None = None,
        navigation_responses: dict[str, FakeResponse] | None = None,
        click_routes: dict[str, FakeRoute] | None = None,
        option_labels: list[str] | None = None,
        downloads: list[FakeDownload] | None = None,
        post_response: FakeAPIResponse | None = None,
        pdf_bytes: bytes = b"",
        extra_pages: list["FakePage"] | None = None,
    ) -> None:
        self.url = url
        self.evaluate_results = evaluate_results or {}
        self.navigation_responses = navigation_responses or {}
        self.click_routes = click_routes or {}
        self.option_labels = option_labels or []
        self.downloads = list(downloads or [])
        self.post_response = post_response or FakeAPIResponse()
        self.pdf_bytes = pdf_bytes
        self.context = FakeContext([self, *(extra_pages or [])])
        self.request = _FakeRequestContext(self)
        self.listeners: dict[str, list[Any]] = {}
        self.routes: list[tuple[str, Any]] = []
        self.visited: list[str] = []
        self.clicked: list[str] = []
        self.selected_options: list[str | None] = []
        self.posted: list[tuple[str, dict[str, str]]] = []
        self.pdf_calls: list[dict[str, Any]] = []
        self.closed = False

    def on(self, event: str, handler: Any) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Any) -> None:
        self.listeners.get(event, []).remove(handler)

    async def goto(self, url: str, **options: Any) -> None:
        self.visited.append(url)
        response = self.navigation_responses.get(url)
        if response is not None:
            for handler in list(self.listeners.get("response", [])):
                handler(response)

    async def route(self, pattern: str, handler: Any) -> None:
        self.routes.append((pattern, handler))

    async def unroute(self, pattern: str, handler: Any) -> None:
        self.routes.remove((pattern, handler))

    async def click(self, selector: str) -> None:
        self.clicked.append(selector)
        route = self.click_routes.get(selector)
        if route is not None:
            for _, handler in list(self.routes):
                await handler(route)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def wait_for_selector(self, selector: str, **options: Any) -> None:
        return None

    async def pdf(self, **options: Any) -> bytes:
        self.pdf_calls.append(options)
        return self.pdf_bytes

    def expect_download(self, timeout: float | None = None) -> _ExpectDownload:
        return _ExpectDownload(self.downloads.pop(0))

    async def close(self) -> None:
        self.closed = True


class FakeSession:
    """Records browser calls; extract/observe answers are scripted per instruction keyword."""

    def __init__(
        self,
        extract_answers: list[Any] | None = None,
        observe_answers: dict[str, list[Any]] | None = None,
        page: FakePage | None = None,
    ) -> None:
        self.extract_answers = list(extract_answers or [])
        self.observe_answers = observe_answers or {}
        self.actions: list[str] = []
        self.page: Any = page

    @property
    def context(self) -> Any:
        return self.page.context if self.page is not None else None

    async def goto(self, url: str, **options: Any) -> None:
        self.actions.append(f"goto {url}")
        if self.page is not None:
            await self.page.goto(url, **options)

    async def act(self, instruction: str, variables: dict[str, str] | None = None) -> None:
        self.actions.append(instruction)

    async def extract(self, instruction: str, schema: type) -> Any:
        answer = self.extract_answers.pop(0)
        return schema.model_validate(answer)

    async def observe(self, instruction: str) -> list[Any]:
        for keyword, answer in self.observe_answers.items():
            if keyword in instruction:
                return answer
        return []

    async def wait(self, milliseconds: int) -> None:
        return None


class FakeSessionProvider:
    def __init__(self, fail_acquire: bool = False) -> None:
        self.fail_acquire = fail_acquire
        self.acquired = 0
        self.released = 0
        self.session = FakeSession()

    async def acquire(self) -> FakeSession:
        if self.fail_acquire:
            raise RuntimeError("Browserbase session limit reached")
        self.acquired += 1
        return self.session

    async def release(self, session: Any) -> None:
        self.released += 1
