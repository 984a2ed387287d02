"""
Client classification from the User-Agent header.

Two questions are answered per request: is this a link-preview crawler (which
should get static HTML with Open Graph tags), and if not, which platform
family is the person on.

Crawler detection is a prioritised chain rather than one flat scan:

1. In-app browsers of messaging/social apps are real people, so a match on
   :data:`IN_APP_BROWSER_PATTERNS` means "not a crawler"...
2. ...unless the header also carries a scraper-only identifier from
   :data:`SCRAPER_OVERRIDE_PATTERNS`. Some apps (KakaoTalk) run both an in-app
   browser and a preview scraper whose User-Agents share a substring.
3. Otherwise the header is checked against :data:`CRAWLER_PATTERNS`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

IOS = "ios"
ANDROID = "android"
DESKTOP = "desktop"

# Link-preview fetchers of social, messaging and search platforms
CRAWLER_PATTERNS = (
    "kakaotalk-scrap",
    "kakao",
    "facebookexternalhit",
    "facebot",
    "twitterbot",
    "linkedinbot",
    "telegrambot",
    "slackbot",
    "discordbot",
    "whatsapp",
    "applebot",
    "googlebot",
    "bingbot",
    "yandexbot",
    "baiduspider",
    "daumoa",
    "yeti",
    "naverbot",
    "pinterestbot",
    "pinterest/",
    "snapchat",
    "linebot",
    "line-poker",
)

# Real users browsing inside an app's embedded browser
IN_APP_BROWSER_PATTERNS = (
    "kakaotalk/",
    "inapp",
    "fban",
    "fbav",
    "instagram",
)

# Scraper identifiers that stay crawlers even when an in-app token is present
SCRAPER_OVERRIDE_PATTERNS = (
    "kakaotalk-scrap",
)


@dataclass(frozen=True)
class ClientProfile:
    is_crawler: bool
    platform: str


def _first_match(ua: str, patterns: Iterable[str]) -> Optional[str]:
    for pattern in patterns:
        if pattern in ua:
            return pattern
    return None


def get_device_type(user_agent: Optional[str]) -> str:
    """Return ``ios``, ``android`` or ``desktop`` for a User-Agent string."""
    ua = (user_agent or "").lower()
    if any(token in ua for token in ("iphone", "ipad", "ipod")):
        return IOS
    if "android" in ua:
        return ANDROID
    return DESKTOP


def is_in_app_browser(user_agent: Optional[str]) -> bool:
    return _first_match((user_agent or "").lower(), IN_APP_BROWSER_PATTERNS) is not None


def has_scraper_override(user_agent: Optional[str]) -> bool:
    return _first_match((user_agent or "").lower(), SCRAPER_OVERRIDE_PATTERNS) is not None


def is_social_crawler(user_agent: Optional[str]) -> bool:
    ua = (user_agent or "").lower()
    if is_in_app_browser(ua) and not has_scraper_override(ua):
        return False
    matched = _first_match(ua, CRAWLER_PATTERNS)
    if matched:
        print(f"[crawler] matched {matched!r} ua={ua[:100]!r}")
    return matched is not None


def classify_client(user_agent: Optional[str]) -> ClientProfile:
    return ClientProfile(
        is_crawler=is_social_crawler(user_agent),
        platform=get_device_type(user_agent),
    )
