from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import PolicyConfig
from .policy import match_ad, match_media


class Disposition(str, Enum):
    ALLOW = "ALLOW"
    ALLOW_MAIN_NAVIGATION_BLOCKED_AD = "ALLOW_MAIN_NAVIGATION_BLOCKED_AD"
    BLOCK_DOMAIN_NOT_ALLOWED = "BLOCK_DOMAIN_NOT_ALLOWED"
    BLOCK_MEDIA_SUBRESOURCE = "BLOCK_MEDIA_SUBRESOURCE"
    BLOCK_AD_SUBRESOURCE = "BLOCK_AD_SUBRESOURCE"

    @property
    def is_blocked(self) -> bool:
        return self is not Disposition.ALLOW


@dataclass(frozen=True)
class Verdict:
    disposition: Disposition
    rule: str
    matched: Optional[str] = None


def explain(url: Optional[str], is_main_frame: bool, config: PolicyConfig) -> Verdict:
    """Classify a request and report which rule decided it.

    Rules run in a fixed order. Top-level navigations must match the
    allow-list first; sub-resources skip the allow-list and only go
    through the media and ad filters.
    """
    if not url:
        return Verdict(Disposition.BLOCK_DOMAIN_NOT_ALLOWED, "empty_url")

    if is_main_frame:
        allowed = config.matched_allowed_domain(url)
        if allowed is None:
            return Verdict(Disposition.BLOCK_DOMAIN_NOT_ALLOWED, "domain_not_allowed")
        if config.ad_blocker:
            ad = match_ad(url)
            if ad is not None:
                return Verdict(
                    Disposition.ALLOW_MAIN_NAVIGATION_BLOCKED_AD, "ad_navigation", ad
                )
        return Verdict(Disposition.ALLOW, "allowed_domain", allowed)

    if config.block_media:
        media = match_media(url)
        if media is not None:
            return Verdict(Disposition.BLOCK_MEDIA_SUBRESOURCE, "media", media)
    if config.ad_blocker:
        ad = match_ad(url)
        if ad is not None:
            return Verdict(Disposition.BLOCK_AD_SUBRESOURCE, "ad", ad)
    return Verdict(Disposition.ALLOW, "subresource")


def classify(url: Optional[str], is_main_frame: bool, config: PolicyConfig) -> Disposition:
    return explain(url, is_main_frame, config).disposition
