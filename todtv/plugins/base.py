"""
Base Plugin Interface - Abstract base class for content provider plugins.

This module defines the contract the host drives every provider through:
main page listing, search, title loading and link resolution. It also
carries the ambient services a provider relies on: a shared HTTP session,
rate limiting and URL fixing.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import BaseModel, Field

from todtv.core.exceptions import NetworkError
from todtv.core.models import (
    HomePageResponse,
    LinkCallback,
    LoadResponse,
    MainPageRequest,
    SearchResult,
    SubtitleCallback,
    TvType,
)
from todtv.plugins.common import URLHelper


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class PluginMetadata(BaseModel):
    """Metadata information for a plugin."""

    name: str = Field(..., description="Provider display name")
    version: str = Field(default="1.0.0", description="Plugin version")
    author: str = Field(default="Unknown", description="Plugin author")
    description: str = Field(default="", description="Plugin description")
    website: Optional[str] = Field(None, description="Source website URL")
    language: str = Field(default="en", description="Content language code")
    supported_types: List[TvType] = Field(
        default_factory=lambda: [TvType.MOVIE, TvType.TV_SERIES],
        description="Content kinds the provider can return"
    )
    has_main_page: bool = Field(default=True, description="Whether get_main_page is supported")
    has_search: bool = Field(default=True, description="Whether search is supported")
    rate_limit: float = Field(default=0.0, ge=0.0, description="Minimum seconds between requests")
    requires_auth: bool = Field(default=False, description="Whether plugin requires authentication")


class BasePlugin(ABC):
    """
    Abstract base class for content provider plugins.

    Subclasses implement the four host operations. None of them raise on
    missing page content or network failures: they return an empty listing,
    an empty list, None or False instead.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the plugin with configuration.

        Args:
            config: Plugin-specific configuration dictionary
        """
        self.config = config or {}
        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time = 0.0

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._initialize_config()

    def _initialize_config(self) -> None:
        """Initialize plugin configuration with defaults."""
        self.timeout = self.config.get('timeout', 30)
        self.user_agent = self.config.get('user_agent', DEFAULT_USER_AGENT)

    @property
    @abstractmethod
    def metadata(self) -> PluginMetadata:
        """Get plugin metadata information."""
        pass

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Get the site root URL."""
        pass

    @property
    def name(self) -> str:
        """Provider name stamped on every result."""
        return self.metadata.name

    @property
    def main_page_requests(self) -> List[MainPageRequest]:
        """Listings the host may request from get_main_page."""
        return [MainPageRequest(name="Home", data=self.base_url)]

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session with proper configuration."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)

            headers = {
                'User-Agent': self.user_agent,
                'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
                'Accept-Language': 'tr-TR,tr;q=0.9,en-US;q=0.8,en;q=0.5',
            }

            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)

        return self._session

    def fix_url(self, url: str) -> str:
        """Resolve a page-relative URL against the site root."""
        return URLHelper.make_absolute(url, self.base_url)

    async def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        current_time = time.monotonic()
        time_since_last = current_time - self._last_request_time

        if time_since_last < self.metadata.rate_limit:
            await asyncio.sleep(self.metadata.rate_limit - time_since_last)

        self._last_request_time = time.monotonic()

    async def _request(self, method: str, url: str, **kwargs) -> str:
        """
        Make a single HTTP request and return the response body.

        Args:
            method: HTTP method
            url: Absolute or site-relative URL
            **kwargs: Additional arguments for the request

        Returns:
            Response body as text

        Raises:
            NetworkError: On HTTP error status, connection failure or timeout
        """
        await self._rate_limit()
        url = self.fix_url(url)

        try:
            self.logger.debug(f"Making {method} request to {url}")

            async with self.session.request(method, url, **kwargs) as response:
                body = await response.text()
                if response.status >= 400:
                    raise NetworkError(
                        f"HTTP {response.status} error for {url}",
                        url=url,
                        status_code=response.status,
                        details=body[:500]
                    )
                return body

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Request to {url} failed: {e}", url=url, details=str(e))

    async def _get_text(self, url: str, **kwargs) -> str:
        """Get text content from URL."""
        return await self._request('GET', url, **kwargs)

    @abstractmethod
    async def get_main_page(self, page: int, request: MainPageRequest) -> HomePageResponse:
        """
        Get the catalog sections of a main page listing.

        Args:
            page: 1-based page number
            request: Which listing to fetch

        Returns:
            Catalog sections; empty when the layout is not recognized
        """
        pass

    @abstractmethod
    async def search(self, query: str) -> List[SearchResult]:
        """
        Search the site.

        Args:
            query: Free-text search query

        Returns:
            Matching results; empty when nothing matches
        """
        pass

    @abstractmethod
    async def load(self, url: str) -> Optional[LoadResponse]:
        """
        Load full metadata for a title page.

        Args:
            url: Absolute URL of the title page

        Returns:
            Load response, or None when the page is not a recognizable title
        """
        pass

    @abstractmethod
    async def load_links(
        self,
        data: str,
        is_casting: bool,
        subtitle_callback: SubtitleCallback,
        callback: LinkCallback,
    ) -> bool:
        """
        Resolve playable links for a title.

        Args:
            data: The ``data_url`` of a load response
            is_casting: Whether the host is casting to another device
            subtitle_callback: Receives discovered subtitle files
            callback: Receives discovered stream links

        Returns:
            True if at least one link was produced
        """
        pass

    async def validate_connection(self) -> bool:
        """
        Validate that the plugin can reach its site.

        Returns:
            True if the site root answered, False otherwise
        """
        try:
            await self._get_text(self.base_url)
            return True
        except NetworkError as e:
            self.logger.error(f"Connection validation failed: {e}")
            return False

    async def cleanup(self) -> None:
        """Clean up resources used by the plugin."""
        if self._session and not self._session.closed:
            await self._session.close()
            self.logger.debug("HTTP session closed")
        self._session = None

    async def __aenter__(self) -> "BasePlugin":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.cleanup()

    def __str__(self) -> str:
        return f"{self.metadata.name} v{self.metadata.version}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.metadata.name}')"


# Export base plugin class and metadata
__all__ = ["BasePlugin", "PluginMetadata", "DEFAULT_USER_AGENT"]
