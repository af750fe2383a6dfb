from __future__ import annotations

from typing import Iterable, Optional

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".svg", ".ico")
VIDEO_EXTENSIONS = (
    ".mp4",
    ".webm",
    ".ogg",
    ".mov",
    ".avi",
    ".mkv",
    ".flv",
    ".m4v",
    ".3gp",
)
# .ogg is listed as both video and audio.
AUDIO_EXTENSIONS = (".mp3", ".wav", ".ogg", ".m4a", ".aac", ".flac", ".wma")

MEDIA_EXTENSIONS = tuple(
    dict.fromkeys(IMAGE_EXTENSIONS + VIDEO_EXTENSIONS + AUDIO_EXTENSIONS)
)
MEDIA_QUERY_MARKERS = tuple(ext + "?" for ext in MEDIA_EXTENSIONS)

EMBED_PLAYER_PATTERNS = (
    "youtube.com/embed",
    "youtube-nocookie.com/embed",
    "player.vimeo.com",
    "dailymotion.com/embed",
    "streamable.com/e/",
    "streamable.com/o/",
)

AD_DOMAINS = (
    "doubleclick.net",
    "googlesyndication.com",
    "googleadservices.com",
    "advertising.com",
    "adnxs.com",
    "quantserve.com",
    "scorecardresearch.com",
    "facebook.com/tr",
    "connect.facebook.net",
    "google-analytics.com",
    "googletagmanager.com",
    "advertising.amazon.com",
    "ads.yahoo.com",
)


def _first_contained(haystack: str, needles: Iterable[str]) -> Optional[str]:
    for needle in needles:
        if needle in haystack:
            return needle
    return None


def match_media(url: Optional[str]) -> Optional[str]:
    """Return the extension or embed pattern that marks ``url`` as media."""
    if not url:
        return None
    lowered = url.lower()
    for ext, marker in zip(MEDIA_EXTENSIONS, MEDIA_QUERY_MARKERS):
        if lowered.endswith(ext) or marker in lowered:
            return ext
    return _first_contained(lowered, EMBED_PLAYER_PATTERNS)


def match_ad(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    return _first_contained(url.lower(), AD_DOMAINS)


def is_media_url(url: Optional[str]) -> bool:
    return match_media(url) is not None


def is_ad_url(url: Optional[str]) -> bool:
    return match_ad(url) is not None
