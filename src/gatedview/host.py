from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .classifier import Disposition
from .config import Orientation, PolicyConfig
from .log import get_logger

logger = get_logger(__name__)

NOT_ALLOWED_NOTICE = "This URL is not allowed"

PORTRAIT_VIEWPORT = {"width": 412, "height": 915}
LANDSCAPE_VIEWPORT = {"width": 915, "height": 412}


@dataclass(frozen=True)
class EmptyResponse:
    status: int = 200
    content_type: str = "text/plain"
    charset: str = "utf-8"
    body: str = ""


EMPTY_RESPONSE = EmptyResponse()


@dataclass(frozen=True)
class HostAction:
    proceed: bool
    empty_response: bool = False
    notice: Optional[str] = None
    show_progress: bool = False
    hide_progress: bool = False

    def as_dict(self) -> dict:
        return {
            "proceed": self.proceed,
            "empty_response": self.empty_response,
            "notice": self.notice,
            "show_progress": self.show_progress,
            "hide_progress": self.hide_progress,
        }


def host_action(disposition: Disposition, is_main_frame: bool) -> HostAction:
    """Translate a disposition into what the browsing surface should do.

    A suppressed ad navigation shows the progress indicator and hides it
    again immediately, since no page-finished event will follow.
    """
    if disposition is Disposition.BLOCK_DOMAIN_NOT_ALLOWED:
        if not is_main_frame:
            return HostAction(proceed=False, empty_response=True)
        return HostAction(proceed=False, notice=NOT_ALLOWED_NOTICE)
    if disposition is Disposition.ALLOW_MAIN_NAVIGATION_BLOCKED_AD:
        return HostAction(proceed=False, show_progress=True, hide_progress=True)
    if disposition in (
        Disposition.BLOCK_MEDIA_SUBRESOURCE,
        Disposition.BLOCK_AD_SUBRESOURCE,
    ):
        return HostAction(proceed=False, empty_response=True)
    return HostAction(proceed=True, show_progress=is_main_frame)


def viewport_for(orientation: Orientation) -> Optional[dict]:
    if orientation is Orientation.PORTRAIT:
        return dict(PORTRAIT_VIEWPORT)
    if orientation is Orientation.LANDSCAPE:
        return dict(LANDSCAPE_VIEWPORT)
    return None


def tls_policy(config: PolicyConfig) -> bool:
    """Return whether the transport should skip certificate validation."""
    if config.ignore_ssl_errors:
        logger.warning(
            "TLS certificate validation disabled for %s (ignoreSslErrors=true)",
            config.domain,
        )
    return config.ignore_ssl_errors
