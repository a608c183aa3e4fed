"""
Plugin Utilities - Common utilities and helpers for plugin development.

This module provides the helpers provider plugins share: CSS-selector
lookups over BeautifulSoup documents, URL normalization, the content-kind
classifier, text cleanup and factories that build validated result models.
"""

import re
import logging
from typing import Iterable, List, Optional, Union
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from todtv.core.models import Episode, Quality, SearchResult, TvType


logger = logging.getLogger(__name__)

Node = Union[BeautifulSoup, Tag]


class HTMLParser:
    """Utility class for HTML parsing operations."""

    def __init__(self, html_content: str, base_url: str = ""):
        """
        Initialize HTML parser.

        Args:
            html_content: HTML content to parse
            base_url: Base URL for resolving relative links
        """
        self.soup = BeautifulSoup(html_content, 'html.parser')
        self.base_url = base_url

    @staticmethod
    def select_first(node: Node, selector: str) -> Optional[Tag]:
        """First element under ``node`` matching ``selector`` in document order."""
        return node.select_one(selector)

    @staticmethod
    def text_of(node: Node, selector: str) -> str:
        """
        Combined text of every element matching ``selector``.

        Texts are stripped and joined by single spaces; empty matches
        contribute nothing.

        Args:
            node: Element or document to search under
            selector: CSS selector string

        Returns:
            Joined text, or an empty string when nothing matches
        """
        texts = (elem.get_text(" ", strip=True) for elem in node.select(selector))
        return " ".join(text for text in texts if text)

    @staticmethod
    def first_text(node: Node, selector: str) -> Optional[str]:
        """Text of the first matching element with non-empty text."""
        for elem in node.select(selector):
            text = elem.get_text(" ", strip=True)
            if text:
                return text
        return None

    @staticmethod
    def attr(node: Optional[Tag], name: str) -> str:
        """
        Attribute value of an element as a stripped string.

        Missing elements or attributes give an empty string. Multi-valued
        attributes (``class``) are joined with spaces.
        """
        if node is None:
            return ""
        value = node.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip()

    def all_text(self, selector: str) -> List[str]:
        """Stripped, non-empty texts of every element matching ``selector``."""
        texts = [elem.get_text(" ", strip=True) for elem in self.soup.select(selector)]
        return [text for text in texts if text]

    def image_source(self, node: Node) -> Optional[str]:
        """
        Source of the first image under ``node``.

        Prefers ``data-src`` for lazy-loaded images, then ``src``. The
        result is made absolute against the parser's base URL.
        """
        img = node.select_one("img")
        source = self.attr(img, "data-src") or self.attr(img, "src")
        if not source:
            return None
        return URLHelper.make_absolute(source, self.base_url)


class QualityExtractor:
    """Utility class for extracting video quality information."""

    QUALITY_PATTERNS = {
        Quality.FOUR_K: [r'2160p?', r'\b4k\b', r'\buhd\b'],
        Quality.ULTRA: [r'1440p?', r'\b2k\b'],
        Quality.HIGH: [r'1080p?', r'\bfhd\b', r'full.?hd'],
        Quality.MEDIUM: [r'720p?', r'\bhd\b'],
        Quality.LOW: [r'480p?', r'\bsd\b', r'360p?']
    }

    @classmethod
    def extract_from_text(cls, text: str) -> List[Quality]:
        """
        Extract quality options from text, best first.

        Args:
            text: Text containing quality information

        Returns:
            List of detected qualities
        """
        text_lower = text.lower()
        detected_qualities = []

        for quality, patterns in cls.QUALITY_PATTERNS.items():
            for pattern in patterns:
                if re.search(pattern, text_lower):
                    detected_qualities.append(quality)
                    break

        return sorted(detected_qualities, key=lambda q: q.height, reverse=True)

    @classmethod
    def extract_from_url(cls, url: str) -> Quality:
        """Best quality mentioned in a URL, or ``Quality.UNKNOWN``."""
        qualities = cls.extract_from_text(url)
        return qualities[0] if qualities else Quality.UNKNOWN


class URLHelper:
    """Utility class for URL manipulation and classification."""

    # Checked in order; the first matching marker decides the kind
    CONTENT_KIND_MARKERS = [
        (TvType.MOVIE, ("/film/", "/movie/")),
        (TvType.TV_SERIES, ("/dizi/", "/series/")),
        (TvType.LIVE, ("/canli/", "/live/")),
    ]

    @staticmethod
    def is_absolute(url: str) -> bool:
        """Check if URL is absolute."""
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    @staticmethod
    def make_absolute(url: str, base_url: str) -> str:
        """
        Convert a relative or protocol-relative URL to an absolute one.

        Empty input stays empty.
        """
        url = (url or "").strip()
        if not url:
            return ""
        if URLHelper.is_absolute(url):
            return url
        if url.startswith("//"):
            return f"https:{url}"
        return urljoin(base_url.rstrip("/") + "/", url)

    @staticmethod
    def extract_domain(url: str) -> str:
        """Host name of a URL without a leading ``www.``."""
        host = urlparse(url).hostname or ""
        return host[4:] if host.startswith("www.") else host

    @staticmethod
    def last_path_segment(url: str) -> Optional[str]:
        """Trailing non-empty path segment of a URL, if any."""
        segments = [segment for segment in urlparse(url).path.split("/") if segment.strip()]
        return segments[-1] if segments else None

    @classmethod
    def classify(cls, url: str) -> Optional[TvType]:
        """
        Derive the content kind from markers in a URL.

        Args:
            url: Title or anchor URL (absolute or relative)

        Returns:
            The matching TvType, or None when no marker is present
        """
        if not url:
            return None
        for kind, markers in cls.CONTENT_KIND_MARKERS:
            if any(marker in url for marker in markers):
                return kind
        return None


def classify_content_url(url: str) -> Optional[TvType]:
    """Content kind of a URL; shared by result mapping and detail loading."""
    return URLHelper.classify(url)


class TextCleaner:
    """Utility class for cleaning and normalizing text content."""

    @staticmethod
    def clean_text(text: Optional[str]) -> str:
        """Collapse whitespace runs and strip the ends."""
        if not text:
            return ""
        return re.sub(r'\s+', ' ', text).strip()

    @staticmethod
    def to_int(text: Optional[str]) -> Optional[int]:
        """
        Parse a whole string as an integer.

        Returns None for empty or non-numeric input, e.g. ``"2021 2022"``.
        """
        if text is None:
            return None
        text = text.strip()
        if not re.fullmatch(r'[+-]?\d+', text):
            return None
        return int(text)

    @staticmethod
    def unique(values: Iterable[str]) -> List[str]:
        """Non-empty values with duplicates removed, keeping first-seen order."""
        return list(dict.fromkeys(value for value in values if value))


def create_search_result(
    title: str,
    url: str,
    provider_name: str,
    kind: TvType,
    poster_url: Optional[str] = None,
) -> Optional[SearchResult]:
    """
    Create a SearchResult, or None when required fields are unusable.

    Args:
        title: Display title
        url: Absolute title URL
        provider_name: Name of the producing provider
        kind: Content kind
        poster_url: Optional poster image URL

    Returns:
        SearchResult instance or None
    """
    clean_title = TextCleaner.clean_text(title)
    if not clean_title or not URLHelper.is_absolute(url):
        return None

    try:
        return SearchResult(
            title=clean_title,
            url=url,
            provider_name=provider_name,
            type=kind,
            poster_url=poster_url or None,
        )
    except ValidationError as e:
        logger.debug(f"Dropping search result '{clean_title}': {e}")
        return None


def create_episode(
    number: int,
    title: str,
    url: str,
    season: int = 1,
    thumbnail_url: Optional[str] = None,
) -> Optional[Episode]:
    """
    Create an Episode with cleaned data.

    A blank title falls back to ``"Episode <number>"``. Returns None when
    the URL is not absolute.
    """
    clean_title = TextCleaner.clean_text(title) or f"Episode {number}"
    if not URLHelper.is_absolute(url):
        return None

    try:
        return Episode(
            url=url,
            title=clean_title,
            season=season,
            episode=number,
            thumbnail_url=thumbnail_url or None,
        )
    except ValidationError as e:
        logger.debug(f"Dropping episode {number} '{clean_title}': {e}")
        return None


# Export utility classes and functions
__all__ = [
    "HTMLParser",
    "QualityExtractor",
    "URLHelper",
    "TextCleaner",
    "classify_content_url",
    "create_search_result",
    "create_episode",
]
