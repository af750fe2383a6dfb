from __future__ import annotations

from collections import Counter
from typing import Any, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Request, Route

from .classifier import Disposition, Verdict, explain
from .config import PolicyConfig
from .host import EMPTY_RESPONSE, HostAction, host_action
from .journal import Journal
from .log import get_logger

logger = get_logger(__name__)


def is_top_level_navigation(request: Request) -> bool:
    if not request.is_navigation_request():
        return False
    try:
        frame = request.frame
    except PlaywrightError:
        # Service worker requests have no frame.
        return False
    return frame.parent_frame is None


class RequestGate:
    """Applies the request policy to every route of a page or context."""

    def __init__(self, config: PolicyConfig, journal: Optional[Journal] = None) -> None:
        self.config = config
        self.journal = journal
        self.notices: list[str] = []
        self.counts: Counter = Counter()

    def decide(self, url: str, is_main_frame: bool) -> tuple[Verdict, HostAction]:
        verdict = explain(url, is_main_frame, self.config)
        action = host_action(verdict.disposition, is_main_frame)
        self.counts[verdict.disposition] += 1
        if self.journal and verdict.disposition.is_blocked:
            self.journal.record(url, is_main_frame, verdict)
        if action.notice:
            self.notices.append(action.notice)
            logger.info("Navigation refused: %s", url)
        elif verdict.disposition.is_blocked:
            logger.debug(
                "%s %s (matched %s)", verdict.disposition.value, url, verdict.matched
            )
        return verdict, action

    async def handle_route(self, route: Route) -> None:
        request = route.request
        _, action = self.decide(request.url, is_top_level_navigation(request))
        if action.proceed:
            await route.continue_()
        elif action.empty_response:
            await route.fulfill(
                status=EMPTY_RESPONSE.status,
                content_type=EMPTY_RESPONSE.content_type,
                body=EMPTY_RESPONSE.body,
            )
        else:
            await route.abort("blockedbyclient")

    async def install(self, target: Any) -> None:
        await target.route("**/*", self.handle_route)

    def blocked_total(self) -> int:
        return sum(
            count for disposition, count in self.counts.items()
            if disposition is not Disposition.ALLOW
        )
