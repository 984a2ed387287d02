"""
Display metadata for link previews.

Crawlers from chat apps and social networks only read the HTML we send back,
so the preview card (title, description, thumbnail) has to be resolved
server-side. Two interchangeable strategies are provided:

* :class:`OEmbedResolver` asks YouTube's oEmbed endpoint about videos, shorts
  and live streams and returns a generic placeholder for playlists, channels
  and anything unrecognised (oEmbed has nothing useful for those without an
  API key).
* :class:`PageScrapeResolver` downloads the destination page and reads its
  meta tags with BeautifulSoup.

Both are blocking ``requests`` clients. :func:`resolve_metadata` runs them on a
worker thread under an overall timeout and never raises: any failure yields
:func:`fallback_metadata` for the same URL.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests
from bs4 import BeautifulSoup

from settings import (
    DEFAULT_SITE_IMAGE,
    FETCH_USER_AGENT,
    METADATA_STRATEGY,
    METADATA_TIMEOUT,
)

VIDEO = "video"
SHORTS = "shorts"
LIVE = "live"
PLAYLIST = "playlist"
CHANNEL = "channel"
UNKNOWN = "unknown"

VIDEO_KINDS = (VIDEO, SHORTS, LIVE)

# (title, description) used when nothing better is known
PLACEHOLDER_TEXT = {
    VIDEO: ("YouTube video", "Watch on YouTube"),
    SHORTS: ("YouTube video", "Watch on YouTube"),
    LIVE: ("YouTube video", "Watch on YouTube"),
    PLAYLIST: ("YouTube playlist", "Browse this playlist on YouTube"),
    CHANNEL: ("YouTube channel", "Visit this channel on YouTube"),
    UNKNOWN: ("YouTube", "Watch on YouTube"),
}


@dataclass
class DisplayMetadata:
    title: str
    description: str
    thumbnail_url: str
    canonical_url: str
    content_kind: str = UNKNOWN
    site_name: Optional[str] = None
    embed_video_url: Optional[str] = None


def _segment_after(segments, marker: str) -> Optional[str]:
    if marker in segments:
        index = segments.index(marker)
        if index + 1 < len(segments):
            return segments[index + 1]
    return None


def parse_youtube_content(url: str) -> Tuple[str, Optional[str]]:
    """Classify a final web URL into ``(content_kind, content_id)``.

    This works on the URL we redirect to, not on the raw incoming link, so it
    only needs to understand the shapes YouTube itself serves.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return UNKNOWN, None
    host = parsed.netloc.lower()
    path = parsed.path or ""
    params = parse_qs(parsed.query)
    segments = [p for p in path.split("/") if p]

    if "/shorts/" in path:
        return SHORTS, _segment_after(segments, "shorts")
    if "/live/" in path:
        return LIVE, _segment_after(segments, "live")
    if path.startswith("/watch"):
        return VIDEO, (params.get("v") or [None])[0]
    if host.endswith("youtu.be"):
        return VIDEO, segments[0] if segments else None
    if "/embed/" in path:
        return VIDEO, _segment_after(segments, "embed")
    if path.startswith("/playlist"):
        return PLAYLIST, (params.get("list") or [None])[0]
    if segments and (segments[0] in ("channel", "c", "user") or segments[0].startswith("@")):
        if segments[0].startswith("@"):
            return CHANNEL, segments[0]
        return CHANNEL, _segment_after(segments, segments[0])
    return UNKNOWN, None


def video_thumbnail(video_id: str, quality: str = "hqdefault") -> str:
    return f"https://img.youtube.com/vi/{video_id}/{quality}.jpg"


def placeholder_metadata(url: str, kind: str, content_id: Optional[str] = None) -> DisplayMetadata:
    title, description = PLACEHOLDER_TEXT.get(kind, PLACEHOLDER_TEXT[UNKNOWN])
    thumbnail = DEFAULT_SITE_IMAGE
    if kind in VIDEO_KINDS and content_id:
        thumbnail = video_thumbnail(content_id)
    return DisplayMetadata(
        title=title,
        description=description,
        thumbnail_url=thumbnail,
        canonical_url=url,
        content_kind=kind,
        site_name="YouTube",
    )


def fallback_metadata(url: str) -> DisplayMetadata:
    """Best-effort record used whenever resolution fails."""
    kind, content_id = parse_youtube_content(url)
    return placeholder_metadata(url, kind, content_id)


class OEmbedResolver:
    """Structured lookup through YouTube's public oEmbed endpoint."""

    OEMBED_URL = "https://www.youtube.com/oembed"

    def __init__(self, timeout: float = METADATA_TIMEOUT) -> None:
        self.timeout = timeout

    def fetch(self, web_url: str) -> DisplayMetadata:
        kind, content_id = parse_youtube_content(web_url)
        if kind not in VIDEO_KINDS or not content_id:
            return placeholder_metadata(web_url, kind, content_id)

        resp = requests.get(
            self.OEMBED_URL,
            params={"url": web_url, "format": "json"},
            headers={"User-Agent": FETCH_USER_AGENT},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        author = data.get("author_name")
        return DisplayMetadata(
            title=data.get("title") or PLACEHOLDER_TEXT[kind][0],
            description=f"Video by {author}" if author else PLACEHOLDER_TEXT[kind][1],
            thumbnail_url=data.get("thumbnail_url") or video_thumbnail(content_id, "maxresdefault"),
            canonical_url=web_url,
            content_kind=kind,
            site_name=data.get("provider_name") or "YouTube",
        )


def _meta(soup: BeautifulSoup, **attrs) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag:
        content = (tag.get("content") or "").strip()
        if content:
            return content
    return None


def _link(soup: BeautifulSoup, **attrs) -> Optional[str]:
    tag = soup.find("link", attrs=attrs)
    if tag:
        href = (tag.get("href") or "").strip()
        if href:
            return href
    return None


def _page_title(soup: BeautifulSoup) -> Optional[str]:
    title_tag = soup.find("title")
    if not title_tag:
        return None
    text = title_tag.get_text(strip=True)
    if text.endswith(" - YouTube"):
        text = text[: -len(" - YouTube")].strip()
    return text or None


def extract_page_metadata(url: str, soup: BeautifulSoup) -> DisplayMetadata:
    """Pick preview fields out of a YouTube page.

    Per field the order is: YouTube's own tags (``name=...``, ``itemprop``),
    Open Graph, Twitter Card, the ``<title>`` element (title only), and finally
    the placeholder for the URL's content kind.
    """
    fallback = fallback_metadata(url)

    title = (
        _meta(soup, name="title")
        or _meta(soup, itemprop="name")
        or _meta(soup, property="og:title")
        or _meta(soup, name="twitter:title")
        or _page_title(soup)
        or fallback.title
    )
    description = (
        _meta(soup, itemprop="description")
        or _meta(soup, name="description")
        or _meta(soup, property="og:description")
        or _meta(soup, name="twitter:description")
        or fallback.description
    )
    thumbnail = (
        _link(soup, itemprop="thumbnailUrl")
        or _meta(soup, property="og:image")
        or _meta(soup, name="twitter:image")
        or fallback.thumbnail_url
    )
    canonical = (
        _link(soup, rel="canonical")
        or _meta(soup, property="og:url")
        or url
    )
    site_name = _meta(soup, property="og:site_name") or fallback.site_name
    embed = (
        _link(soup, itemprop="embedUrl")
        or _meta(soup, property="og:video:url")
        or _meta(soup, property="og:video:secure_url")
        or _meta(soup, name="twitter:player")
    )

    return DisplayMetadata(
        title=title,
        description=description,
        thumbnail_url=thumbnail,
        canonical_url=canonical,
        content_kind=fallback.content_kind,
        site_name=site_name,
        embed_video_url=embed,
    )


class PageScrapeResolver:
    """Reads preview fields straight from the destination page's markup."""

    def __init__(self, timeout: float = METADATA_TIMEOUT) -> None:
        self.timeout = timeout

    def fetch(self, web_url: str) -> DisplayMetadata:
        headers = {
            "User-Agent": FETCH_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
        resp = requests.get(web_url, headers=headers, timeout=self.timeout, allow_redirects=True)
        resp.raise_for_status()
        soup = BeautifulSoup(resp.text, "html.parser")
        return extract_page_metadata(web_url, soup)


RESOLVERS = {
    "oembed": OEmbedResolver,
    "scrape": PageScrapeResolver,
}


def get_resolver(strategy: Optional[str] = None, timeout: Optional[float] = None):
    resolver_cls = RESOLVERS.get((strategy or METADATA_STRATEGY).lower(), OEmbedResolver)
    return resolver_cls(timeout or METADATA_TIMEOUT)


async def resolve_metadata(
    web_url: str,
    strategy: Optional[str] = None,
    timeout: Optional[float] = None,
    resolver=None,
) -> DisplayMetadata:
    """Resolve preview metadata for ``web_url`` without ever raising.

    The blocking fetch runs on a worker thread; when ``timeout`` elapses the
    result is abandoned and the fallback record returned immediately.
    """
    timeout = timeout or METADATA_TIMEOUT
    resolver = resolver or get_resolver(strategy, timeout)
    try:
        return await asyncio.wait_for(asyncio.to_thread(resolver.fetch, web_url), timeout=timeout)
    except asyncio.TimeoutError:
        print(f"[metadata] timed out after {timeout}s for {web_url}")
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        print(f"[metadata] upstream returned {status} for {web_url}")
    except requests.exceptions.RequestException as e:
        print(f"[metadata] request failed for {web_url}: {e}")
    except Exception as e:
        print(f"[metadata] could not resolve {web_url}: {e!r}")
    return fallback_metadata(web_url)
