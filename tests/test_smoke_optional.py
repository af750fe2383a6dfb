import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError

from conftest import make_config
from gatedview.browser_manager import BrowserManager
from gatedview.config import HostSettings


def test_gated_session_refuses_foreign_start_url_optional() -> None:
    async def scenario() -> list[str]:
        manager = BrowserManager(HostSettings(navigation_timeout_ms=5000))
        try:
            session = await manager.open_session(
                make_config(startUrl="https://not-allowed.invalid/")
            )
            notices = list(session.gate.notices)
            await session.close()
            return notices
        finally:
            await manager.close()

    try:
        notices = asyncio.run(scenario())
    except PlaywrightError:
        pytest.skip("Chromium not available")
    assert notices == ["This URL is not allowed"]
