"""
TodTV Provider - Content provider plugin for the TOD TV streaming site.

Scrapes todtv.com.tr into a normalized content model (catalog sections,
search results, movie/series/live details and stream links) behind an
async provider interface, together with the host-side plugin manager
and embedded-player extractors that drive it.
"""

__version__ = "1.0.0"
__author__ = "TodTV Provider Team"

# Package metadata
__title__ = "todtv"
__description__ = "TOD TV content provider plugin"
__license__ = "MIT"

# Version info tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split(".")))

# Export main components for easy importing
from todtv.core.models import (
    TvType,
    SearchResult,
    HomePageResponse,
    LoadResponse,
    Episode,
    ExtractorLink,
)
from todtv.core.plugin_manager import PluginManager
from todtv.core.utils import setup_logging

__all__ = [
    "__version__",
    "__author__",
    "TvType",
    "SearchResult",
    "HomePageResponse",
    "LoadResponse",
    "Episode",
    "ExtractorLink",
    "PluginManager",
    "setup_logging",
]
