"""Tests for the TOD TV provider operations."""

from urllib.parse import parse_qs, urlparse

import pytest

import todtv.plugins.todtv.plugin as plugin_module
from todtv.core.exceptions import ConfigurationError, NetworkError
from todtv.core.models import (
    LiveStreamLoadResponse,
    MainPageRequest,
    MovieLoadResponse,
    Quality,
    TvSeriesLoadResponse,
    TvType,
)
from todtv.plugins.todtv import TodTvPlugin, VideoResponse

from tests.conftest import BASE_URL


MOVIE_URL = f"{BASE_URL}/film/kis-uykusu"
SERIES_URL = f"{BASE_URL}/dizi/the-last-of-us"
LIVE_URL = f"{BASE_URL}/canli/bein-sports-1"


class LinkCollector:
    def __init__(self):
        self.links = []
        self.subtitles = []

    def on_link(self, link):
        self.links.append(link)

    def on_subtitle(self, subtitle):
        self.subtitles.append(subtitle)


@pytest.fixture
def collector():
    return LinkCollector()


@pytest.fixture
def extractor_calls(monkeypatch):
    calls = []

    async def fake_load_extractor(url, referer, subtitle_callback, callback, session=None, registry=None):
        calls.append((url, referer))
        return False

    monkeypatch.setattr(plugin_module, "load_extractor", fake_load_extractor)
    return calls


@pytest.fixture
def video_lookups(plugin, monkeypatch):
    """Serve the video API from a dict of id to response (or exception)."""
    lookups = []
    answers = {}

    async def fake_get_video(video_id):
        lookups.append(video_id)
        answer = answers.get(video_id)
        if isinstance(answer, Exception):
            raise answer
        return answer

    monkeypatch.setattr(plugin.api, "get_video", fake_get_video)
    return lookups, answers


class TestConfiguration:

    async def test_defaults(self, plugin):
        assert plugin.name == "TOD TV"
        assert plugin.base_url == BASE_URL
        assert plugin.metadata.language == "tr"
        assert set(plugin.metadata.supported_types) == {TvType.MOVIE, TvType.TV_SERIES, TvType.LIVE}

    def test_configured_rate_limit_reaches_metadata(self):
        assert TodTvPlugin({"rate_limit": 2.0}).metadata.rate_limit == 2.0

    def test_main_url_override(self):
        custom = TodTvPlugin({"main_url": "https://staging.todtv.com.tr/"})
        assert custom.base_url == "https://staging.todtv.com.tr"
        assert custom.api.main_url == "https://staging.todtv.com.tr"

    def test_invalid_config(self):
        with pytest.raises(ConfigurationError):
            TodTvPlugin({"timeout": 1})

    async def test_main_page_requests(self, plugin):
        assert plugin.main_page_requests == [MainPageRequest(name="Ana Sayfa", data=BASE_URL)]


class TestMainPage:

    async def test_sections(self, plugin, serve_pages):
        fetched = serve_pages({BASE_URL: "home.html"})

        response = await plugin.get_main_page(1, plugin.main_page_requests[0])

        assert fetched == [BASE_URL]
        assert [section.name for section in response.items] == ["Popüler Filmler", "Yeni Diziler", "Canlı Yayın"]
        assert response.has_next is False

    async def test_defaults_to_site_root(self, plugin, serve_pages):
        fetched = serve_pages({BASE_URL: "home.html"})

        await plugin.get_main_page()

        assert fetched == [BASE_URL]

    async def test_network_failure_gives_empty_listing(self, plugin, serve_pages):
        serve_pages({})

        response = await plugin.get_main_page()

        assert response.items == []
        assert response.has_next is False


class TestSearch:

    async def test_search_url_form_encodes_query(self, plugin):
        url = plugin.search_url("Tatlı Küçük & Yalancılar")

        assert url.startswith(f"{BASE_URL}/arama?q=")
        assert " " not in url
        assert parse_qs(urlparse(url).query) == {"q": ["Tatlı Küçük & Yalancılar"]}

    async def test_results(self, plugin, serve_pages):
        search_url = plugin.search_url("yalanci")
        fetched = serve_pages({search_url: "search.html"})

        results = await plugin.search("yalanci")

        assert fetched == [search_url]
        assert [result.title for result in results] == ["Tatlı Küçük Yalancılar", "Yalancı Yalancı", "TOD 1"]
        assert all(result.provider_name == "TOD TV" for result in results)

    async def test_blank_query_makes_no_request(self, plugin, serve_pages):
        fetched = serve_pages({})

        assert await plugin.search("   ") == []
        assert fetched == []

    async def test_network_failure_gives_no_results(self, plugin, serve_pages):
        serve_pages({})

        assert await plugin.search("yalanci") == []


class TestLoad:

    async def test_movie(self, plugin, serve_pages):
        serve_pages({MOVIE_URL: "movie.html"})

        response = await plugin.load(MOVIE_URL)

        assert isinstance(response, MovieLoadResponse)
        assert response.type is TvType.MOVIE
        assert response.title == "Kış Uykusu"
        assert str(response.url) == MOVIE_URL
        assert response.data_url == MOVIE_URL
        assert response.provider_name == "TOD TV"
        assert response.year == 2014
        assert response.tags == ["Dram", "Bağımsız"]
        assert response.poster_url == "https://cdn.todtv.com.tr/og/kis-uykusu.jpg"

    async def test_series(self, plugin, serve_pages):
        serve_pages({SERIES_URL: "series.html"})

        response = await plugin.load(SERIES_URL)

        assert isinstance(response, TvSeriesLoadResponse)
        assert response.type is TvType.TV_SERIES
        assert response.title == "The Last of Us"
        assert [ep.episode for ep in response.episodes] == [1, 2, 1]
        assert [ep.season for ep in response.episodes] == [1, 1, 2]

    async def test_series_without_episodes(self, plugin, serve_pages):
        url = f"{BASE_URL}/dizi/yeni-dizi"
        serve_pages({url: "series_empty.html"})

        response = await plugin.load(url)

        assert isinstance(response, TvSeriesLoadResponse)
        assert response.episodes == []

    async def test_live(self, plugin, serve_pages):
        serve_pages({LIVE_URL: "live.html"})

        response = await plugin.load(LIVE_URL)

        assert isinstance(response, LiveStreamLoadResponse)
        assert response.type is TvType.LIVE
        assert response.title == "beIN SPORTS 1"
        assert response.poster_url == "https://cdn.todtv.com.tr/logos/bein1.png"
        assert response.plot is None
        assert response.tags == []

    async def test_page_without_title(self, plugin, serve_pages):
        serve_pages({MOVIE_URL: "no_title.html"})

        assert await plugin.load(MOVIE_URL) is None

    async def test_unknown_kind_makes_no_request(self, plugin, serve_pages):
        fetched = serve_pages({})

        assert await plugin.load(f"{BASE_URL}/kampanya/yaz") is None
        assert fetched == []

    async def test_network_failure(self, plugin, serve_pages):
        serve_pages({})

        assert await plugin.load(MOVIE_URL) is None


class TestLoadLinks:

    async def test_iframe_is_delegated_and_wins(self, plugin, serve_pages, extractor_calls, video_lookups, collector):
        serve_pages({MOVIE_URL: "player_iframe.html"})
        lookups, _ = video_lookups

        found = await plugin.load_links(MOVIE_URL, False, collector.on_subtitle, collector.on_link)

        assert found is True
        assert extractor_calls == [("https://player.example-embed.com/e/abc123", MOVIE_URL)]
        assert collector.links == []
        assert lookups == []

    async def test_inline_m3u8_links(self, plugin, serve_pages, extractor_calls, video_lookups, collector):
        serve_pages({LIVE_URL: "player_inline.html"})
        lookups, _ = video_lookups

        found = await plugin.load_links(LIVE_URL, False, collector.on_subtitle, collector.on_link)

        assert found is True
        assert extractor_calls == []
        assert lookups == []
        assert [link.url for link in collector.links] == [
            "https://live.todtv.com.tr/bein1/playlist.m3u8?token=abc",
            "https://live.todtv.com.tr/bein1/backup.m3u8",
        ]
        for link in collector.links:
            assert link.is_m3u8 is True
            assert link.referer == LIVE_URL
            assert link.quality is Quality.UNKNOWN
            assert link.source == "TOD TV"

    async def test_api_fallback(self, plugin, serve_pages, extractor_calls, video_lookups, collector):
        serve_pages({MOVIE_URL: "movie.html"})
        lookups, answers = video_lookups
        answers["kis-uykusu"] = VideoResponse(url="https://stream.todtv.com.tr/kis-uykusu/master.m3u8")

        found = await plugin.load_links(MOVIE_URL, False, collector.on_subtitle, collector.on_link)

        assert found is True
        assert lookups == ["kis-uykusu"]
        assert len(collector.links) == 1
        assert collector.links[0].url == "https://stream.todtv.com.tr/kis-uykusu/master.m3u8"
        assert collector.links[0].is_m3u8 is True
        assert collector.links[0].referer == MOVIE_URL

    async def test_api_hls_field(self, plugin, serve_pages, video_lookups, collector):
        serve_pages({MOVIE_URL: "movie.html"})
        _, answers = video_lookups
        answers["kis-uykusu"] = VideoResponse(hls="https://stream.todtv.com.tr/kis-uykusu.mp4")

        assert await plugin.load_links(MOVIE_URL, False, collector.on_subtitle, collector.on_link) is True
        assert collector.links[0].is_m3u8 is False

    async def test_api_used_when_page_fetch_fails(self, plugin, serve_pages, video_lookups, collector):
        serve_pages({})
        lookups, answers = video_lookups
        answers["kis-uykusu"] = VideoResponse(url="https://stream.todtv.com.tr/kis-uykusu/master.m3u8")

        assert await plugin.load_links(MOVIE_URL, False, collector.on_subtitle, collector.on_link) is True
        assert lookups == ["kis-uykusu"]

    async def test_nothing_found(self, plugin, serve_pages, video_lookups, collector):
        serve_pages({MOVIE_URL: "movie.html"})
        _, answers = video_lookups
        answers["kis-uykusu"] = VideoResponse()

        assert await plugin.load_links(MOVIE_URL, False, collector.on_subtitle, collector.on_link) is False
        assert collector.links == []

    async def test_api_network_failure(self, plugin, serve_pages, video_lookups, collector):
        serve_pages({})
        _, answers = video_lookups
        answers["kis-uykusu"] = NetworkError("HTTP 401 error", status_code=401)

        assert await plugin.load_links(MOVIE_URL, False, collector.on_subtitle, collector.on_link) is False
        assert collector.links == []


class TestAuthenticate:

    async def test_without_credentials(self, plugin, monkeypatch):
        async def fail_login(email, password):
            raise AssertionError("login must not be called")

        monkeypatch.setattr(plugin.api, "login", fail_login)

        assert await plugin.authenticate() is None

    async def test_with_credentials(self, monkeypatch):
        configured = TodTvPlugin({"email": "izleyici@example.com", "password": "gizli", "rate_limit": 0})
        seen = []

        async def fake_login(email, password):
            seen.append((email, password))
            return "token-123"

        monkeypatch.setattr(configured.api, "login", fake_login)

        assert await configured.authenticate() == "token-123"
        assert seen == [("izleyici@example.com", "gizli")]

    async def test_login_failure(self, monkeypatch):
        configured = TodTvPlugin({"email": "izleyici@example.com", "password": "gizli"})

        async def failing_login(email, password):
            raise NetworkError("HTTP 403 error", status_code=403)

        monkeypatch.setattr(configured.api, "login", failing_login)

        assert await configured.authenticate() is None
