"""HTML responses: preview pages for crawlers and the mobile landing page."""

from __future__ import annotations

import json
from html import escape

from settings import APP_OPEN_FALLBACK_MS
from youtube_metadata import VIDEO_KINDS, DisplayMetadata


def _js_string(value: str) -> str:
    """Quote a value for inline <script> use."""
    return json.dumps(value).replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def build_social_meta_html(metadata: DisplayMetadata, redirect_url: str) -> str:
    """Open Graph / Twitter Card page that also forwards real browsers to ``redirect_url``."""
    title = escape(metadata.title)
    description = escape(metadata.description)
    thumbnail = escape(metadata.thumbnail_url)
    url = escape(metadata.canonical_url)
    site_name = escape(metadata.site_name or "YouTube")
    safe_redirect = escape(redirect_url)
    og_type = "video.other" if metadata.content_kind in VIDEO_KINDS else "website"

    video_tags = ""
    if metadata.embed_video_url:
        embed = escape(metadata.embed_video_url)
        video_tags = f"""
    <meta property="og:video:url" content="{embed}">
    <meta property="og:video:secure_url" content="{embed}">
    <meta property="og:video:type" content="text/html">"""

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <meta name="description" content="{description}">

    <meta property="og:type" content="{og_type}">
    <meta property="og:title" content="{title}">
    <meta property="og:description" content="{description}">
    <meta property="og:image" content="{thumbnail}">
    <meta property="og:image:width" content="1280">
    <meta property="og:image:height" content="720">
    <meta property="og:url" content="{url}">
    <meta property="og:site_name" content="{site_name}">{video_tags}

    <meta name="twitter:card" content="summary_large_image">
    <meta name="twitter:title" content="{title}">
    <meta name="twitter:description" content="{description}">
    <meta name="twitter:image" content="{thumbnail}">

    <meta http-equiv="refresh" content="0; url={safe_redirect}">
</head>
<body>
    <p>Opening YouTube...</p>
    <script>window.location.href={_js_string(redirect_url)};</script>
</body>
</html>"""


def build_interstitial_html(web_url: str, android_url: str, ios_url: str, platform: str) -> str:
    """Mobile landing page.

    On load it tries the native app URL for ``platform`` and arms a timer that
    sends the browser to ``web_url``. There is no reliable signal that the app
    actually opened, so the timer is only cancelled when the user explicitly
    picks the browser button.
    """
    app_url = ios_url if platform == "ios" else android_url
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="robots" content="noindex">
    <title>Open in YouTube</title>
</head>
<body>
    <main>
        <a id="open-app" href="{escape(app_url or web_url)}">Open in the YouTube app</a>
        <a id="open-web" href="{escape(web_url)}">Open in browser</a>
    </main>
    <script>
    (function () {{
        var webUrl = {_js_string(web_url)};
        var appUrl = {_js_string(app_url or "")};
        var fallbackDelay = {int(APP_OPEN_FALLBACK_MS)};
        var timer = null;

        function openWeb() {{
            if (timer) {{ clearTimeout(timer); timer = null; }}
            window.location.href = webUrl;
        }}

        function openApp() {{
            if (!appUrl) {{ openWeb(); return; }}
            if (timer) {{ clearTimeout(timer); }}
            window.location.href = appUrl;
            timer = setTimeout(function () {{ window.location.href = webUrl; }}, fallbackDelay);
        }}

        document.getElementById("open-app").addEventListener("click", function (e) {{
            e.preventDefault();
            openApp();
        }});
        document.getElementById("open-web").addEventListener("click", function (e) {{
            e.preventDefault();
            openWeb();
        }});
        window.addEventListener("load", openApp);
    }})();
    </script>
</body>
</html>"""
