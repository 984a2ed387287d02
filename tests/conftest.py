"""
Shared pytest fixtures for the YouTube link redirector tests.
"""

import pytest
from bs4 import BeautifulSoup
from fastapi.testclient import TestClient

from main import app


# ============================================================================
# User-Agent Fixtures
# ============================================================================

@pytest.fixture
def desktop_ua():
    return (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )


@pytest.fixture
def android_ua():
    return (
        "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
    )


@pytest.fixture
def iphone_ua():
    return (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_5 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.5 Mobile/15E148 Safari/604.1"
    )


@pytest.fixture
def crawler_ua():
    return "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)"


# ============================================================================
# HTTP Client Fixtures
# ============================================================================

@pytest.fixture
def client():
    """Test client that does not follow redirects, so 302s can be inspected."""
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


# ============================================================================
# Page Markup Fixtures
# ============================================================================

@pytest.fixture
def video_page_html():
    """Trimmed-down watch page with YouTube's own tags plus Open Graph."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Never Gonna Give You Up - YouTube</title>
        <meta name="title" content="Rick Astley - Never Gonna Give You Up (Official Video)">
        <meta name="description" content="The official video for Never Gonna Give You Up">
        <meta property="og:site_name" content="YouTube">
        <meta property="og:url" content="https://www.youtube.com/watch?v=dQw4w9WgXcQ">
        <meta property="og:title" content="OG Title">
        <meta property="og:image" content="https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg">
        <meta property="og:description" content="OG description">
        <meta property="og:video:url" content="https://www.youtube.com/embed/dQw4w9WgXcQ">
        <link rel="canonical" href="https://www.youtube.com/watch?v=dQw4w9WgXcQ">
    </head>
    <body></body>
    </html>
    """


@pytest.fixture
def video_page_soup(video_page_html):
    return BeautifulSoup(video_page_html, "html.parser")


@pytest.fixture
def og_only_soup():
    html = """
    <html>
    <head>
        <title>Fallback Title - YouTube</title>
        <meta property="og:title" content="Only OG Title">
        <meta property="og:description" content="Only OG description">
        <meta property="og:image" content="https://example.com/og.jpg">
    </head>
    </html>
    """
    return BeautifulSoup(html, "html.parser")


@pytest.fixture
def title_only_soup():
    return BeautifulSoup(
        "<html><head><title>Lofi Beats - YouTube</title></head></html>",
        "html.parser",
    )


@pytest.fixture
def empty_soup():
    return BeautifulSoup("", "html.parser")
