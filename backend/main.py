"""
YouTube link redirector backend

This FastAPI application rewrites YouTube-like links into whatever suits the
client that follows them. Any path is treated as a link, so
``https://<this-host>/watch?v=ID``, ``https://<this-host>/youtu.be/ID`` and
``https://<this-host>/https://m.youtube.com/shorts/ID`` all work.

Per request one of three responses is chosen:

* **Crawlers** (KakaoTalk, Facebook, Slack, Discord ... link previews) get a
  small HTML page with Open Graph and Twitter Card tags, cacheable for an
  hour, which also forwards any real browser to the video.
* **Desktop browsers** get a plain 302 to ``https://www.youtube.com/...``.
* **Phones** are sent to ``/redirect``, a landing page that tries the native
  app (``youtube://`` on iOS, an ``intent://`` URL on Android) and falls back
  to the web URL after a short delay.

The root path and any unexpected failure redirect to the YouTube home page;
no error page is ever shown.

Environment variables are documented in ``settings.py``.

To run the development server locally:

    uvicorn main:app --reload --port 8000
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse

from device_detection import DESKTOP, classify_client
from html_generator import build_interstitial_html, build_social_meta_html
from settings import CRAWLER_CACHE_MAX_AGE, IOS_APP_SCHEME, PLATFORM_HOME, SERVICE_NAME
from youtube_links import build_destinations, describe_reference, parse_youtube_url
from youtube_metadata import resolve_metadata

app = FastAPI(title="YouTube Link Redirector")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def home_redirect() -> RedirectResponse:
    return RedirectResponse(url=PLATFORM_HOME, status_code=302)


def get_base_url(request: Request) -> str:
    """Public origin of this service, honouring a reverse proxy's ``x-forwarded-proto``."""
    proto = (request.headers.get("x-forwarded-proto") or "https").split(",")[0].strip()
    host = request.headers.get("host") or request.url.netloc or "localhost:8000"
    return f"{proto}://{host}"


def app_url_or_empty(url: Optional[str], prefix: str) -> str:
    """Only native URLs of the expected scheme reach the landing page script."""
    if url and url.lower().startswith(prefix):
        return url
    return ""


def build_interstitial_url(base_url: str, web: str, android: str, ios: str, platform: str) -> str:
    params = urlencode({
        "web": web,
        "android": android,
        "ios": ios,
        "platform": platform,
    })
    return f"{base_url}/redirect?{params}"


async def route_request(raw_link: str, user_agent: Optional[str], base_url: str) -> Response:
    """Pick the response for one incoming link.

    :param raw_link: Path and query exactly as received, without the leading slash.
    :param user_agent: The request's User-Agent header.
    :param base_url: Origin used to build the absolute ``/redirect`` URL.
    """
    try:
        path_part = (raw_link or "").split("?", 1)[0]
        if not path_part.strip().strip("/"):
            return home_redirect()

        ref = parse_youtube_url(raw_link)
        destinations = build_destinations(ref)
        client = classify_client(user_agent)
        print(f"[route] {describe_reference(ref)} crawler={client.is_crawler} platform={client.platform}")

        if client.is_crawler:
            metadata = await resolve_metadata(destinations.web)
            html = build_social_meta_html(metadata, destinations.web)
            return HTMLResponse(
                content=html,
                status_code=200,
                headers={"Cache-Control": f"public, max-age={CRAWLER_CACHE_MAX_AGE}"},
            )

        if client.platform == DESKTOP:
            return RedirectResponse(url=destinations.web, status_code=302)

        redirect_url = build_interstitial_url(
            base_url,
            destinations.web,
            destinations.android_intent,
            destinations.ios_scheme,
            client.platform,
        )
        print(f"[route] mobile ({client.platform}) -> {redirect_url}")
        return RedirectResponse(url=redirect_url, status_code=302)
    except Exception as e:
        print(f"[route] error handling {raw_link!r}: {e!r}")
        return home_redirect()


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME}


@app.get("/")
async def root() -> Response:
    return home_redirect()


@app.get("/redirect", response_class=HTMLResponse)
async def redirect_page(
    web: Optional[str] = None,
    android: Optional[str] = None,
    ios: Optional[str] = None,
    platform: str = "android",
) -> Response:
    """Mobile landing page that attempts the native app before falling back to ``web``."""
    if not web or not web.lower().startswith(("https://", "http://")):
        return RedirectResponse(url="/", status_code=302)
    android = app_url_or_empty(android, "intent://")
    ios = app_url_or_empty(ios, f"{IOS_APP_SCHEME.lower()}://")
    html = build_interstitial_html(web, android, ios, platform.lower())
    return HTMLResponse(content=html, status_code=200)


@app.get("/{link_path:path}")
async def link_handler(request: Request, link_path: str) -> Response:
    """Catch-all endpoint: every other path is a link to rewrite."""
    query = request.url.query
    raw_link = f"{link_path}?{query}" if query else link_path
    return await route_request(raw_link, request.headers.get("user-agent", ""), get_base_url(request))
