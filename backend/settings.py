"""
Runtime configuration for the YouTube link redirector.

Values are read from the environment (a local ``.env`` file is honoured via
python-dotenv). Every setting has a default so the service runs without any
configuration at all.

* ``PLATFORM_HOME`` – where empty paths and unexpected failures are sent.
* ``IOS_APP_SCHEME`` – URL scheme registered by the iOS app.
* ``ANDROID_PACKAGE`` – package id used in Android intent URLs.
* ``METADATA_STRATEGY`` – ``oembed`` (structured lookup) or ``scrape`` (read
  the page's meta tags directly).
* ``METADATA_TIMEOUT`` – seconds allowed for a metadata lookup.
* ``CRAWLER_CACHE_MAX_AGE`` – seconds crawlers may cache preview HTML.
* ``APP_OPEN_FALLBACK_MS`` – delay before the landing page gives up on the app.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

SERVICE_NAME = "youtube-link-redirector"

PLATFORM_HOST = "www.youtube.com"
PLATFORM_HOME = os.getenv("PLATFORM_HOME", f"https://{PLATFORM_HOST}")
IOS_APP_SCHEME = os.getenv("IOS_APP_SCHEME", "youtube")
ANDROID_PACKAGE = os.getenv("ANDROID_PACKAGE", "com.google.android.youtube")

METADATA_STRATEGIES = ("oembed", "scrape")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        print(f"[settings] ignoring invalid {name}={raw!r}, using {default}")
        return default
    return value if value > 0 else default


def _env_strategy() -> str:
    strategy = (os.getenv("METADATA_STRATEGY") or "oembed").strip().lower()
    if strategy not in METADATA_STRATEGIES:
        print(f"[settings] unknown METADATA_STRATEGY={strategy!r}, using oembed")
        return "oembed"
    return strategy


METADATA_STRATEGY = _env_strategy()
METADATA_TIMEOUT = _env_number("METADATA_TIMEOUT", 5.0, float)
CRAWLER_CACHE_MAX_AGE = _env_number("CRAWLER_CACHE_MAX_AGE", 3600, int)
APP_OPEN_FALLBACK_MS = _env_number("APP_OPEN_FALLBACK_MS", 2000, int)

# User-Agent sent upstream when fetching metadata
FETCH_USER_AGENT = "Mozilla/5.0 (compatible; YouTubeLinkRedirector/1.0)"
DEFAULT_SITE_IMAGE = f"https://{PLATFORM_HOST}/img/desktop/yt_1200.png"
