import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from .config import HostSettings, PolicyConfig
from .gate import RequestGate
from .host import tls_policy, viewport_for
from .journal import Journal
from .log import get_logger

logger = get_logger(__name__)


class BrowserManager:
    def __init__(self, settings: HostSettings) -> None:
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def start(self) -> Browser:
        async with self._lock:
            if self._browser:
                return self._browser
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.headless
            )
            logger.info("Chromium launched (headless=%s)", self.settings.headless)
            return self._browser

    async def open_session(
        self, config: PolicyConfig, journal: Optional[Journal] = None
    ) -> "GatedSession":
        browser = await self.start()
        context_kwargs: dict = {"ignore_https_errors": tls_policy(config)}
        viewport = viewport_for(config.orientation)
        if viewport:
            context_kwargs["viewport"] = viewport
        context = await browser.new_context(**context_kwargs)

        gate = RequestGate(config, journal=journal)
        await gate.install(context)
        page = await context.new_page()
        page.set_default_navigation_timeout(self.settings.navigation_timeout_ms)
        session = GatedSession(
            context=context,
            page=page,
            gate=gate,
            journal=journal,
            created_at=_utc_now(),
        )
        try:
            await page.goto(config.start_url)
        except PlaywrightError as exc:
            logger.warning("Start URL %s did not load: %s", config.start_url, exc)
        return session

    async def close(self) -> None:
        async with self._lock:
            if self._browser:
                await self._browser.close()
                self._browser = None
            if self._playwright:
                await self._playwright.stop()
                self._playwright = None


@dataclass
class GatedSession:
    context: BrowserContext
    page: Page
    gate: RequestGate
    created_at: str
    journal: Optional[Journal] = None
    status: str = "active"

    async def close(self) -> None:
        if self.status == "closed":
            return
        await self.context.close()
        self.status = "closed"
        if self.journal:
            self.journal.close()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
