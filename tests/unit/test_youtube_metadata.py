"""
Unit tests for content classification and meta tag extraction.
"""

import pytest

from settings import DEFAULT_SITE_IMAGE
from youtube_metadata import (
    CHANNEL,
    LIVE,
    PLAYLIST,
    SHORTS,
    UNKNOWN,
    VIDEO,
    extract_page_metadata,
    fallback_metadata,
    get_resolver,
    OEmbedResolver,
    PageScrapeResolver,
    parse_youtube_content,
)


class TestParseYoutubeContent:

    @pytest.mark.parametrize("url, expected", [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", (VIDEO, "dQw4w9WgXcQ")),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PL1", (VIDEO, "dQw4w9WgXcQ")),
        ("https://youtu.be/dQw4w9WgXcQ", (VIDEO, "dQw4w9WgXcQ")),
        ("https://www.youtube.com/embed/dQw4w9WgXcQ", (VIDEO, "dQw4w9WgXcQ")),
        ("https://www.youtube.com/shorts/abc123", (SHORTS, "abc123")),
        ("https://www.youtube.com/live/stream42", (LIVE, "stream42")),
        ("https://www.youtube.com/playlist?list=PL1&si=abc", (PLAYLIST, "PL1")),
        ("https://www.youtube.com/channel/UCxyz", (CHANNEL, "UCxyz")),
        ("https://www.youtube.com/c/SomeName", (CHANNEL, "SomeName")),
        ("https://www.youtube.com/user/Legacy", (CHANNEL, "Legacy")),
        ("https://www.youtube.com/@handle/videos", (CHANNEL, "@handle")),
        ("https://www.youtube.com/results?search_query=x", (UNKNOWN, None)),
        ("https://www.youtube.com/", (UNKNOWN, None)),
    ])
    def test_classification(self, url, expected):
        assert parse_youtube_content(url) == expected

    def test_watch_without_v_has_no_id(self):
        assert parse_youtube_content("https://www.youtube.com/watch") == (VIDEO, None)


class TestFallbackMetadata:

    def test_video_gets_derived_thumbnail(self):
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        metadata = fallback_metadata(url)
        assert metadata.content_kind == VIDEO
        assert metadata.thumbnail_url == "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
        assert metadata.canonical_url == url
        assert metadata.title == "YouTube video"

    def test_shorts_kind_preserved(self):
        metadata = fallback_metadata("https://www.youtube.com/shorts/abc123")
        assert metadata.content_kind == SHORTS
        assert metadata.thumbnail_url.endswith("/vi/abc123/hqdefault.jpg")

    @pytest.mark.parametrize("url, kind", [
        ("https://www.youtube.com/playlist?list=PL1", PLAYLIST),
        ("https://www.youtube.com/@handle", CHANNEL),
        ("https://www.youtube.com/feed/trending", UNKNOWN),
    ])
    def test_non_video_uses_site_image(self, url, kind):
        metadata = fallback_metadata(url)
        assert metadata.content_kind == kind
        assert metadata.thumbnail_url == DEFAULT_SITE_IMAGE


class TestExtractPageMetadata:

    URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    def test_platform_tags_win(self, video_page_soup):
        metadata = extract_page_metadata(self.URL, video_page_soup)
        assert metadata.title == "Rick Astley - Never Gonna Give You Up (Official Video)"
        assert metadata.description == "The official video for Never Gonna Give You Up"
        assert metadata.thumbnail_url == "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        assert metadata.canonical_url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert metadata.site_name == "YouTube"
        assert metadata.embed_video_url == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        assert metadata.content_kind == VIDEO

    def test_open_graph_used_when_no_platform_tags(self, og_only_soup):
        metadata = extract_page_metadata(self.URL, og_only_soup)
        assert metadata.title == "Only OG Title"
        assert metadata.description == "Only OG description"
        assert metadata.thumbnail_url == "https://example.com/og.jpg"
        assert metadata.canonical_url == self.URL
        assert metadata.embed_video_url is None

    def test_title_element_used_last(self, title_only_soup):
        metadata = extract_page_metadata(self.URL, title_only_soup)
        assert metadata.title == "Lofi Beats"
        assert metadata.description == "Watch on YouTube"
        assert metadata.thumbnail_url.endswith("/vi/dQw4w9WgXcQ/hqdefault.jpg")

    def test_empty_page_falls_back_to_defaults(self, empty_soup):
        metadata = extract_page_metadata("https://www.youtube.com/playlist?list=PL1", empty_soup)
        assert metadata.title == "YouTube playlist"
        assert metadata.thumbnail_url == DEFAULT_SITE_IMAGE
        assert metadata.content_kind == PLAYLIST

    def test_twitter_card_used_before_title(self):
        from bs4 import BeautifulSoup
        soup = BeautifulSoup(
            '<html><head><title>T - YouTube</title>'
            '<meta name="twitter:title" content="Card Title">'
            '<meta name="twitter:image" content="https://example.com/card.jpg">'
            '</head></html>',
            "html.parser",
        )
        metadata = extract_page_metadata(self.URL, soup)
        assert metadata.title == "Card Title"
        assert metadata.thumbnail_url == "https://example.com/card.jpg"

    def test_blank_content_is_skipped(self):
        from bs4 import BeautifulSoup
        soup = BeautifulSoup(
            '<html><head><meta name="title" content="  ">'
            '<meta property="og:title" content="Real Title"></head></html>',
            "html.parser",
        )
        assert extract_page_metadata(self.URL, soup).title == "Real Title"


class TestGetResolver:

    def test_strategies(self):
        assert isinstance(get_resolver("oembed"), OEmbedResolver)
        assert isinstance(get_resolver("scrape"), PageScrapeResolver)
        assert isinstance(get_resolver("SCRAPE"), PageScrapeResolver)

    def test_unknown_strategy_defaults_to_oembed(self):
        assert isinstance(get_resolver("carrier-pigeon"), OEmbedResolver)

    def test_timeout_passed_through(self):
        assert get_resolver("scrape", timeout=1.5).timeout == 1.5
