"""
TOD TV Plugin - Main plugin implementation for todtv.com.tr

This module implements the TOD TV provider: the home page catalog,
search, title loading for movies, series and live channels, and stream
link resolution through embedded players, inline HLS manifests or the
site's video API.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

from pydantic import ValidationError

from todtv.core.exceptions import ConfigurationError, NetworkError
from todtv.core.extractors import load_extractor
from todtv.core.models import (
    ExtractorLink,
    HomePageResponse,
    LinkCallback,
    LiveStreamLoadResponse,
    LoadResponse,
    MainPageRequest,
    MovieLoadResponse,
    Quality,
    SearchResult,
    SubtitleCallback,
    TvSeriesLoadResponse,
    TvType,
)
from todtv.plugins.base import BasePlugin, PluginMetadata
from todtv.plugins.common import URLHelper, classify_content_url

from .api import TodTvApi
from .config import TodTvConfig
from .parser import TodTvParser


logger = logging.getLogger(__name__)


SUPPORTED_TYPES = [TvType.MOVIE, TvType.TV_SERIES, TvType.LIVE]

plugin_metadata = PluginMetadata(
    name="TOD TV",
    version="1.0.0",
    author="TodTV Provider Team",
    description="Content provider for todtv.com.tr with catalog, search, details and stream links",
    website="https://www.todtv.com.tr",
    language="tr",
    supported_types=SUPPORTED_TYPES,
    has_main_page=True,
    has_search=True,
    rate_limit=0.5,
    requires_auth=False
)

default_config = TodTvConfig().to_dict()


class TodTvPlugin(BasePlugin):
    """
    TOD TV provider for content from todtv.com.tr

    Every operation degrades instead of raising: network failures and
    unrecognized markup give an empty listing, an empty list, None or False.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize TOD TV plugin.

        Args:
            config: Plugin configuration dictionary

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        merged_config = {**default_config}
        if config:
            merged_config.update(config)

        try:
            self.settings = TodTvConfig.model_validate(merged_config)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid TOD TV plugin configuration: {e}",
                plugin_name=plugin_metadata.name,
                details=e.errors()
            )

        super().__init__(self.settings.to_dict())

        self.api = TodTvApi(
            lambda: self.session,
            main_url=self.settings.main_url,
            auth_token=self.settings.auth_token,
        )

    @property
    def metadata(self) -> PluginMetadata:
        """Get plugin metadata."""
        return plugin_metadata.model_copy(update={"rate_limit": self.settings.rate_limit})

    @property
    def base_url(self) -> str:
        """Get base URL for todtv.com.tr"""
        return self.settings.main_url

    @property
    def main_page_requests(self) -> List[MainPageRequest]:
        return [MainPageRequest(name="Ana Sayfa", data=self.base_url)]

    def _parser(self, html_content: str) -> TodTvParser:
        return TodTvParser(html_content, self.base_url, self.name)

    def search_url(self, query: str) -> str:
        """Search endpoint URL with the query form-encoded."""
        return f"{self.base_url}{self.settings.search_path}?q={quote_plus(query)}"

    async def get_main_page(self, page: int = 1, request: Optional[MainPageRequest] = None) -> HomePageResponse:
        """
        Fetch the home page catalog.

        Only the first page exists; the request's ``data`` defaults to
        the site root.
        """
        url = request.data if request and request.data else self.base_url

        try:
            html_content = await self._get_text(url)
        except NetworkError as e:
            logger.warning(f"Main page request failed: {e}")
            return HomePageResponse()

        sections = self._parser(html_content).parse_main_page()
        logger.info(f"Found {len(sections)} catalog sections on {url}")
        return HomePageResponse(items=sections, has_next=False)

    async def search(self, query: str) -> List[SearchResult]:
        """
        Search todtv.com.tr

        Args:
            query: Search query string

        Returns:
            Matching results; empty for a blank query or on failure
        """
        if not query or not query.strip():
            return []

        search_url = self.search_url(query)
        logger.debug(f"Searching TOD TV: {search_url}")

        try:
            html_content = await self._get_text(search_url)
        except NetworkError as e:
            logger.warning(f"Search failed for query '{query}': {e}")
            return []

        results = self._parser(html_content).parse_search_results()
        logger.info(f"Found {len(results)} results for query: '{query}'")
        return results

    async def load(self, url: str) -> Optional[LoadResponse]:
        """
        Load a title page.

        Args:
            url: Absolute URL of the title page

        Returns:
            Movie, series or live load response, or None when the page has
            no recognizable title or the URL is not a known content kind
        """
        kind = classify_content_url(url)
        if kind is None:
            logger.debug(f"Unrecognized content kind for {url}")
            return None

        try:
            html_content = await self._get_text(url)
        except NetworkError as e:
            logger.warning(f"Failed to load {url}: {e}")
            return None

        parser = self._parser(html_content)
        details = parser.parse_details()
        if not details['title']:
            logger.info(f"No title found on {url}")
            return None

        common = {
            'title': details['title'],
            'url': url,
            'provider_name': self.name,
            'data_url': url,
            'poster_url': details['poster_url'],
        }

        try:
            if kind is TvType.MOVIE:
                return MovieLoadResponse(
                    plot=details['plot'],
                    year=details['year'],
                    tags=details['tags'],
                    **common
                )

            if kind is TvType.TV_SERIES:
                episodes = parser.parse_episodes()
                logger.info(f"Found {len(episodes)} episodes for: {details['title']}")
                return TvSeriesLoadResponse(
                    plot=details['plot'],
                    year=details['year'],
                    tags=details['tags'],
                    episodes=episodes,
                    **common
                )

            return LiveStreamLoadResponse(**common)

        except ValidationError as e:
            logger.warning(f"Discarding load response for {url}: {e}")
            return None

    def _make_link(self, url: str, referer: str, is_m3u8: bool) -> ExtractorLink:
        return ExtractorLink(
            source=self.name,
            name=self.name,
            url=url,
            referer=referer,
            quality=Quality.UNKNOWN,
            is_m3u8=is_m3u8,
        )

    async def load_links(
        self,
        data: str,
        is_casting: bool,
        subtitle_callback: SubtitleCallback,
        callback: LinkCallback,
    ) -> bool:
        """
        Resolve stream links for a title page.

        Strategies run in order and the first one that yields a link wins:
        an embedded player frame, inline HLS manifest URLs in the page
        source, then the site's video API.
        """
        try:
            page_text = await self._get_text(data)
        except NetworkError as e:
            logger.warning(f"Failed to fetch {data} for links: {e}")
            page_text = None

        if page_text is not None:
            parser = self._parser(page_text)

            iframe_src = parser.find_iframe_source()
            if iframe_src:
                logger.debug(f"Delegating embedded player {iframe_src}")
                await load_extractor(iframe_src, data, subtitle_callback, callback, session=self.session)
                return True

            manifest_urls = parser.find_m3u8_urls(page_text)
            for manifest_url in manifest_urls:
                callback(self._make_link(manifest_url, data, is_m3u8=True))
            if manifest_urls:
                logger.info(f"Found {len(manifest_urls)} inline HLS links on {data}")
                return True

        return await self._load_api_link(data, callback)

    async def _load_api_link(self, data: str, callback: LinkCallback) -> bool:
        video_id = URLHelper.last_path_segment(data)
        if not video_id:
            return False

        try:
            video = await self.api.get_video(video_id)
        except NetworkError as e:
            logger.warning(f"Video API lookup failed for {video_id}: {e}")
            return False

        stream_url = video.stream_url if video else None
        if not stream_url:
            logger.info(f"No stream found for {data}")
            return False

        callback(self._make_link(stream_url, data, is_m3u8=".m3u8" in stream_url))
        return True

    async def authenticate(self) -> Optional[str]:
        """
        Log in with the configured credentials.

        Returns:
            The bearer token now used by the video API, or None when no
            credentials are configured or the login failed
        """
        if not self.settings.has_credentials:
            logger.debug("No TOD TV credentials configured")
            return None

        try:
            return await self.api.login(self.settings.email, self.settings.password)
        except NetworkError as e:
            logger.warning(f"TOD TV login failed: {e}")
            return None

    def __str__(self) -> str:
        return f"TOD TV Plugin v{self.metadata.version}"

    def __repr__(self) -> str:
        return f"TodTvPlugin(base_url='{self.base_url}', enabled={self.settings.enabled})"


# Export plugin class and metadata
__all__ = ["TodTvPlugin", "plugin_metadata", "default_config", "SUPPORTED_TYPES"]
