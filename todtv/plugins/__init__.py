"""
Plugin Layer - Content provider implementations.

This module contains the provider contract and the individual site
implementations that feed catalog, search, details and stream links
to the host.
"""

from todtv.plugins.common import (
    HTMLParser,
    QualityExtractor,
    URLHelper,
    TextCleaner,
    classify_content_url,
    create_search_result,
    create_episode,
)
from todtv.plugins.base import BasePlugin, PluginMetadata

__all__ = [
    # Base Plugin Architecture
    "BasePlugin",
    "PluginMetadata",
    # Plugin Development Utilities
    "HTMLParser",
    "QualityExtractor",
    "URLHelper",
    "TextCleaner",
    "classify_content_url",
    "create_search_result",
    "create_episode",
]
