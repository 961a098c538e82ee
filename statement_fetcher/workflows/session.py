"""
Remote browser session lifecycle backed by Stagehand on Browserbase.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import BaseModel

from statement_fetcher.config import BrowserSettings
from statement_fetcher.workflows.base import BrowserSession, ModelT, ObservedElement

logger = logging.getLogger(__name__)


class BrowserSessionError(RuntimeError):
    """
    Raised when a remote browser session cannot be created.
    """


class BrowserSessionProvider(Protocol):
    async def acquire(self) -> BrowserSession:
        ...

    async def release(self, session: BrowserSession) -> None:
        ...


class StagehandBrowserSession:
    """
    BrowserSession adapter over an initialised Stagehand client.
    """

    def __init__(self, stagehand: Any) -> None:
        self._stagehand = stagehand

    @property
    def page(self) -> Any:
        return self._stagehand.page

    @property
    def context(self) -> Any:
        return self._stagehand.context

    async def goto(self, url: str, **options: Any) -> None:
        await self.page.goto(url, **options)

    async def act(self, instruction: str, variables: dict[str, str] | None = None) -> None:
        if variables:
            await self.page.act(instruction, variables=variables)
        else:
            await self.page.act(instruction)

    async def extract(self, instruction: str, schema: type[ModelT]) -> ModelT:
        result = await self.page.extract(instruction=instruction, schema=schema)
        if isinstance(result, schema):
            return result
        if isinstance(result, BaseModel):
            return schema.model_validate(result.model_dump())
        return schema.model_validate(result or {})

    async def observe(self, instruction: str) -> list[ObservedElement]:
        results = await self.page.observe(instruction)
        return [
            ObservedElement(
                selector=getattr(item, "selector", ""),
                description=getattr(item, "description", "") or "",
            )
            for item in results or []
            if getattr(item, "selector", None)
        ]

    async def wait(self, milliseconds: int) -> None:
        await self.page.wait_for_timeout(milliseconds)

    async def close(self) -> None:
        await self._stagehand.close()


class StagehandSessionProvider:
    """
    Creates one Stagehand client per acquisition and closes it on release.
    """

    def __init__(self, *, settings: BrowserSettings) -> None:
        self._settings = settings

    async def acquire(self) -> StagehandBrowserSession:
        from stagehand import Stagehand, StagehandConfig

        config = StagehandConfig(
            env=self._settings.env,
            api_key=self._settings.browserbase_api_key,
            project_id=self._settings.browserbase_project_id,
            model_name=self._settings.model_name,
            model_api_key=self._settings.model_api_key,
            verbose=self._settings.verbose,
        )
        stagehand = Stagehand(config)
        try:
            await stagehand.init()
        except Exception as exc:
            raise BrowserSessionError(f"Failed to start browser session: {exc}") from exc

        if stagehand.page is None:
            await stagehand.close()
            raise BrowserSessionError("Failed to initialize browser page")

        logger.info("Browser session started env=%s model=%s", self._settings.env, self._settings.model_name)
        return StagehandBrowserSession(stagehand)

    async def release(self, session: BrowserSession) -> None:
        if isinstance(session, StagehandBrowserSession):
            await session.close()
            logger.info("Browser session closed")
