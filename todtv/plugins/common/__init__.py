"""
Common utilities for plugin development.

This package contains shared utilities and helper functions
used across provider plugins.
"""

from .utils import (
    HTMLParser,
    QualityExtractor,
    URLHelper,
    TextCleaner,
    classify_content_url,
    create_search_result,
    create_episode,
)

__all__ = [
    "HTMLParser",
    "QualityExtractor",
    "URLHelper",
    "TextCleaner",
    "classify_content_url",
    "create_search_result",
    "create_episode",
]
