"""
Normalization of raw YouTube-style links and construction of destination URLs.

The redirector receives links in many shapes: full URLs pasted after the
host (``/https://youtube.com/watch?v=ID``), browser-mangled schemes with a
single slash (``/https:/youtu.be/ID``), mobile hosts (``m.youtube.com``) or
just a bare video id. :func:`parse_youtube_url` reduces all of them to one
canonical reference, and the three ``build_*`` functions turn a reference
into the web URL, the iOS app URL and the Android intent URL.

Parsing never fails. Anything that is not recognised is carried through
verbatim as an :class:`OpaqueRef` so YouTube itself gets to decide what to do
with it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Union
from urllib.parse import parse_qs, quote, unquote

from settings import ANDROID_PACKAGE, IOS_APP_SCHEME, PLATFORM_HOST


@dataclass(frozen=True)
class VideoRef:
    video_id: str
    extra_query: str = ""


@dataclass(frozen=True)
class ShortsRef:
    shorts_id: str
    extra_query: str = ""


@dataclass(frozen=True)
class LiveRef:
    live_id: str
    extra_query: str = ""


@dataclass(frozen=True)
class PlaylistRef:
    playlist_id: str
    share_token: Optional[str] = None
    query: str = ""


@dataclass(frozen=True)
class ChannelRef:
    """Channel in any of its forms: ``channel/ID``, ``c/NAME``, ``user/NAME`` or ``@handle``."""

    channel_path: str
    query: str = ""


@dataclass(frozen=True)
class OpaqueRef:
    original_path: str
    query: str = ""


CanonicalReference = Union[VideoRef, ShortsRef, LiveRef, PlaylistRef, ChannelRef, OpaqueRef]


@dataclass(frozen=True)
class DestinationSet:
    web: str
    ios_scheme: str
    android_intent: str


_SCHEME_RE = re.compile(r"^https?:/{1,2}", re.IGNORECASE)
_SUBDOMAIN_RE = re.compile(r"^(?:www|m)\.", re.IGNORECASE)
_HOST_RE = re.compile(r"^(?:youtube\.com|youtu\.be)(?:/|$)", re.IGNORECASE)
_BARE_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{10,12}$")
_CHANNEL_PREFIXES = ("channel/", "c/", "user/", "@")


def _query_segments(query: str) -> List[str]:
    """Split a ``?a=1&b=2`` string into raw ``a=1`` segments, dropping empties."""
    return [segment for segment in query.lstrip("?").split("&") if segment]


def _find_segment(query: str, name: str) -> Optional[str]:
    prefix = f"{name}="
    for segment in _query_segments(query):
        if segment.startswith(prefix) and len(segment) > len(prefix):
            return segment
    return None


def _first_param(query: str, name: str) -> Optional[str]:
    values = parse_qs(query.lstrip("?")).get(name)
    if values and values[0]:
        return values[0]
    return None


def strip_link_prefix(raw_link: str) -> str:
    """Remove whitespace, scheme, ``www.``/``m.`` and the YouTube host from a raw link."""
    clean = raw_link.strip().lstrip("/")
    clean = _SCHEME_RE.sub("", clean)
    clean = _SUBDOMAIN_RE.sub("", clean)
    clean = _HOST_RE.sub("", clean)
    return clean.lstrip("/")


def parse_youtube_url(raw_link: str) -> CanonicalReference:
    """Classify a raw path-and-query into a canonical reference.

    Rules are tried in order and the first match wins: shorts, live, watch,
    playlist, channel, bare short-link id. Everything else becomes an
    :class:`OpaqueRef`. An empty input yields ``OpaqueRef("")``; callers are
    expected to handle the root path before getting here.
    """
    clean = strip_link_prefix(raw_link or "")

    path, sep, rest = clean.partition("?")
    query = f"?{rest}" if sep and rest else ""

    if path.startswith("shorts/"):
        shorts_id = path[len("shorts/"):].split("/")[0]
        if shorts_id:
            return ShortsRef(shorts_id, query)

    if path.startswith("live/"):
        live_id = path[len("live/"):].split("/")[0]
        if live_id:
            return LiveRef(live_id, query)

    if path == "watch":
        video_id = _first_param(query, "v")
        if video_id:
            # companion params such as list/index/t ride along untouched
            return VideoRef(video_id, query)

    if path == "playlist":
        playlist_id = _first_param(query, "list")
        if playlist_id:
            kept = [_find_segment(query, "list"), _find_segment(query, "si")]
            reduced = "?" + "&".join(segment for segment in kept if segment)
            share_token = _first_param(query, "si")
            return PlaylistRef(playlist_id, share_token, reduced)

    if path.startswith(_CHANNEL_PREFIXES):
        return ChannelRef(path, query)

    if "/" not in path and _BARE_VIDEO_ID_RE.match(path):
        return VideoRef(path, query)

    return OpaqueRef(path, query)


def _watch_path(video_id: str, extra_query: str) -> str:
    # the watch form already carries v=; keep everything else as-is
    extras = [s for s in _query_segments(extra_query) if not s.startswith("v=")]
    suffix = "".join(f"&{segment}" for segment in extras)
    return f"/watch?v={video_id}{suffix}"


def _normalized_query(query: str) -> str:
    return query if query and query != "?" else ""


def content_path(ref: CanonicalReference) -> str:
    """Path and query on the YouTube host for a reference, always starting with ``/``."""
    if isinstance(ref, VideoRef):
        return _watch_path(ref.video_id, ref.extra_query)
    if isinstance(ref, ShortsRef):
        return f"/shorts/{ref.shorts_id}"
    if isinstance(ref, LiveRef):
        return f"/live/{ref.live_id}"
    if isinstance(ref, PlaylistRef):
        return "/playlist" + (_normalized_query(ref.query) or f"?list={ref.playlist_id}")
    if isinstance(ref, ChannelRef):
        return f"/{ref.channel_path}{_normalized_query(ref.query)}"
    if isinstance(ref, OpaqueRef):
        return f"/{ref.original_path}{_normalized_query(ref.query)}"
    raise TypeError(f"unsupported reference: {ref!r}")


def build_web_url(ref: CanonicalReference) -> str:
    return f"https://{PLATFORM_HOST}{content_path(ref)}"


def build_ios_url(ref: CanonicalReference) -> str:
    """iOS deep link; ``youtube://`` is accepted by more app versions than ``vnd.youtube://``."""
    return f"{IOS_APP_SCHEME}://{PLATFORM_HOST}{content_path(ref)}"


def build_android_intent(ref: CanonicalReference) -> str:
    """Android intent URL that opens the app, or the web URL when the app is missing."""
    fallback = quote(build_web_url(ref), safe="-_.!~*'()")
    return (
        f"intent://{PLATFORM_HOST}{content_path(ref)}"
        f"#Intent;scheme=https;package={ANDROID_PACKAGE};"
        f"S.browser_fallback_url={fallback};end"
    )


def build_destinations(ref: CanonicalReference) -> DestinationSet:
    return DestinationSet(
        web=build_web_url(ref),
        ios_scheme=build_ios_url(ref),
        android_intent=build_android_intent(ref),
    )


def describe_reference(ref: CanonicalReference) -> str:
    """Short human-readable label used in log lines."""
    if isinstance(ref, VideoRef):
        return f"video:{ref.video_id}"
    if isinstance(ref, ShortsRef):
        return f"shorts:{ref.shorts_id}"
    if isinstance(ref, LiveRef):
        return f"live:{ref.live_id}"
    if isinstance(ref, PlaylistRef):
        return f"playlist:{ref.playlist_id}"
    if isinstance(ref, ChannelRef):
        return f"channel:{unquote(ref.channel_path)}"
    return f"opaque:{ref.original_path or '/'}"
