"""
Extractors - Generic embedded-player link resolution.

Providers that find a third-party player in an ``<iframe>`` hand its URL to
``load_extractor``. The registry picks an extractor for the URL: a direct
stream URL is emitted as-is, a registered extractor handles its own domain,
and anything else goes to the generic embed extractor, which scans the
player page for an HLS or MP4 source.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import urlparse

import aiohttp

from todtv.core.exceptions import ExtractorError, NetworkError
from todtv.core.models import ExtractorLink, LinkCallback, SubtitleCallback
from todtv.plugins.common import QualityExtractor, URLHelper


logger = logging.getLogger(__name__)

STREAM_EXTENSIONS = (".m3u8", ".mp4")

# Player configuration patterns, most specific first
_SOURCE_PATTERNS = [
    re.compile(r"""sources\s*:\s*\[\s*\{[^}]*file\s*:\s*["'](https?://[^"']+\.(?:m3u8|mp4)[^"']*)"""),
    re.compile(r"""file\s*:\s*["'](https?://[^"']+\.(?:m3u8|mp4)[^"']*)"""),
    re.compile(r"""(?:source|src)\s*[:=]\s*["'](https?://[^"']+\.(?:m3u8|mp4)[^"']*)"""),
    re.compile(r"""["'](https?://[^"'\s]+\.m3u8[^"'\s]*)["']"""),
    re.compile(r"""["'](https?://[^"'\s]+\.mp4[^"'\s]*)["']"""),
]


def is_stream_url(url: str) -> bool:
    """Whether a URL points straight at an HLS manifest or MP4 file."""
    return urlparse(url).path.lower().endswith(STREAM_EXTENSIONS)


def extract_video_url(html: str) -> Optional[str]:
    """
    Extract a playable video URL from embed page HTML.

    Tries JWPlayer-style ``sources:[{file:...}]`` blocks, then ``file:``
    and ``src:`` assignments, then bare quoted HLS and MP4 URLs.

    Returns the first video URL found, or ``None``.
    """
    normalized = html.replace("\\/", "/").replace("\\'", "'").replace('\\"', '"')
    for pattern in _SOURCE_PATTERNS:
        match = pattern.search(normalized)
        if match:
            return match.group(1)
    return None


class ExtractorApi(ABC):
    """Base class for embedded player extractors."""

    name: str = "Extractor"
    main_url: str = ""

    def matches(self, url: str) -> bool:
        """Whether this extractor handles ``url``; by default, same domain."""
        if not self.main_url:
            return False
        own = URLHelper.extract_domain(self.main_url)
        host = URLHelper.extract_domain(url)
        return bool(own) and (host == own or host.endswith(f".{own}"))

    def make_link(self, url: str, referer: str) -> ExtractorLink:
        """Build a stream link stamped with this extractor's name."""
        return ExtractorLink(
            source=self.name,
            name=self.name,
            url=url,
            referer=referer,
            quality=QualityExtractor.extract_from_url(url),
            is_m3u8=".m3u8" in url,
        )

    @abstractmethod
    async def get_url(
        self,
        url: str,
        referer: Optional[str],
        session: aiohttp.ClientSession,
        subtitle_callback: SubtitleCallback,
        callback: LinkCallback,
    ) -> bool:
        """
        Resolve ``url`` and emit links through ``callback``.

        Returns:
            True if at least one link was emitted
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class DirectLinkExtractor(ExtractorApi):
    """Emits URLs that already point at a stream."""

    name = "Direct"

    def matches(self, url: str) -> bool:
        return is_stream_url(url)

    async def get_url(self, url, referer, session, subtitle_callback, callback) -> bool:
        callback(self.make_link(url, referer or ""))
        return True


class GenericEmbedExtractor(ExtractorApi):
    """Fetches a player page and scans it for a stream source."""

    name = "Embed"

    def matches(self, url: str) -> bool:
        return URLHelper.is_absolute(url)

    async def get_url(self, url, referer, session, subtitle_callback, callback) -> bool:
        headers = {"Referer": referer} if referer else {}
        try:
            async with session.get(url, headers=headers) as response:
                body = await response.text()
                if response.status >= 400:
                    raise NetworkError(
                        f"HTTP {response.status} error for {url}",
                        url=url,
                        status_code=response.status,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Request to {url} failed: {e}", url=url, details=str(e))

        video_url = extract_video_url(body)
        if not video_url:
            raise ExtractorError(f"No video source found in embed page {url}", url=url)

        callback(self.make_link(video_url, url))
        return True


class ExtractorRegistry:
    """
    Ordered collection of extractors.

    Site-specific extractors are consulted before the built-in fallbacks;
    the generic embed extractor always comes last.
    """

    def __init__(self, extractors: Optional[List[ExtractorApi]] = None):
        self._extractors: List[ExtractorApi] = list(extractors or [])
        self._direct = DirectLinkExtractor()
        self._fallback = GenericEmbedExtractor()

    def register(self, extractor: ExtractorApi) -> None:
        """Add a site-specific extractor."""
        self._extractors.append(extractor)
        logger.debug(f"Registered extractor: {extractor.name}")

    @property
    def extractors(self) -> List[ExtractorApi]:
        return [self._direct, *self._extractors, self._fallback]

    def find(self, url: str) -> Optional[ExtractorApi]:
        """First extractor that handles ``url``."""
        for extractor in self.extractors:
            if extractor.matches(url):
                return extractor
        return None


default_registry = ExtractorRegistry()


async def load_extractor(
    url: str,
    referer: Optional[str],
    subtitle_callback: SubtitleCallback,
    callback: LinkCallback,
    session: Optional[aiohttp.ClientSession] = None,
    registry: Optional[ExtractorRegistry] = None,
) -> bool:
    """
    Resolve an embedded player URL into stream links.

    Args:
        url: Absolute embed or stream URL
        referer: Page the embed was found on
        subtitle_callback: Receives discovered subtitle files
        callback: Receives discovered stream links
        session: HTTP session to reuse; a temporary one is opened otherwise
        registry: Extractor registry, defaults to ``default_registry``

    Returns:
        True if a link was emitted, False otherwise
    """
    registry = registry or default_registry
    extractor = registry.find(url)
    if extractor is None:
        logger.warning(f"No extractor found for {url}")
        return False

    logger.debug(f"Resolving {url} with {extractor.name}")

    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=30))

    try:
        return await extractor.get_url(url, referer, session, subtitle_callback, callback)
    except (NetworkError, ExtractorError) as e:
        logger.warning(f"{extractor.name} extractor failed for {url}: {e}")
        return False
    finally:
        if owns_session:
            await session.close()


__all__ = [
    "ExtractorApi",
    "DirectLinkExtractor",
    "GenericEmbedExtractor",
    "ExtractorRegistry",
    "default_registry",
    "extract_video_url",
    "is_stream_url",
    "load_extractor",
]
