"""Playwright browser session scoped to a single evaluation."""

from __future__ import annotations

import logging
import traceback
from typing import Any, Callable, List, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from sketch_evaluator.config import Settings
from sketch_evaluator.evaluator.errors import LaunchError, NavigationError, NavigationTimeoutError

logger = logging.getLogger(__name__)


class Subscription:
    """Handle for a page listener; removing it stops delivery to the handler."""

    def __init__(self, page: Page, event: str, handler: Callable[[Any], None]) -> None:
        self._page = page
        self.event = event
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._page.remove_listener(self.event, self.handler)


class BrowserSession:
    """One headless Chromium instance with exactly one page.

    Usable directly (``open`` / ``close``) or as an async context manager.
    ``close`` is idempotent and safe after a partially failed ``open``.
    """

    def __init__(
        self,
        config: Settings,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self._config = config
        self._playwright_factory = playwright_factory
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None
        self._subscriptions: List[Subscription] = []
        self._closed = False

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser session not opened. Use async with or call open().")
        return self._page

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "BrowserSession":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> "BrowserSession":
        if self._closed:
            raise RuntimeError("Browser session already closed")
        try:
            self._playwright = await self._playwright_factory().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self._config.headless,
                args=list(self._config.launch_args),
            )
            self._page = await self._browser.new_page()
        except PlaywrightError as exc:
            logger.error("Browser launch failed: %s", exc.message)
            raise LaunchError(exc.message, stack=exc.stack) from exc
        except Exception as exc:  # noqa: BLE001 - driver spawn failures surface as OSError and friends
            logger.error("Browser launch failed: %s", exc)
            raise LaunchError(str(exc), stack=traceback.format_exc()) from exc
        logger.debug("Browser session opened (headless=%s)", self._config.headless)
        return self

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> Subscription:
        page = self.page
        page.on(event, handler)
        subscription = Subscription(page, event, handler)
        self._subscriptions.append(subscription)
        return subscription

    async def navigate(self, url: str, timeout_ms: Optional[int] = None) -> None:
        timeout = timeout_ms if timeout_ms is not None else self._config.navigation_timeout_ms
        try:
            await self.page.goto(url, wait_until=self._config.wait_until, timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise NavigationTimeoutError(exc.message, stack=exc.stack) from exc
        except PlaywrightError as exc:
            raise NavigationError(exc.message, stack=exc.stack) from exc
        except Exception as exc:  # noqa: BLE001 - any other navigation fault is reported, not raised
            raise NavigationError(str(exc), stack=traceback.format_exc()) from exc
        logger.debug("Navigated to %s", url)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        for subscription in self._subscriptions:
            try:
                subscription.unsubscribe()
            except Exception as exc:  # noqa: BLE001 - teardown must continue
                logger.debug("Unable to remove %s listener: %s", subscription.event, exc)
        self._subscriptions.clear()

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as exc:  # noqa: BLE001 - teardown must continue
                logger.warning("Error while closing browser: %s", exc)
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as exc:  # noqa: BLE001 - teardown must continue
                logger.warning("Error while stopping Playwright: %s", exc)
            self._playwright = None
        self._page = None
        logger.debug("Browser session closed")
