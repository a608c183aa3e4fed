"""
Core Layer - Content model, errors and host-side services.

This module contains the data models exchanged with provider plugins,
the exception taxonomy, the embedded-player extractors and the plugin
manager that discovers and drives providers.
"""

from todtv.core.exceptions import (
    TodTvError,
    ConfigurationError,
    PluginError,
    NetworkError,
    ExtractorError,
)
from todtv.core.models import (
    TvType,
    Quality,
    SearchResult,
    HomePageList,
    HomePageResponse,
    MainPageRequest,
    Episode,
    LoadResponse,
    MovieLoadResponse,
    TvSeriesLoadResponse,
    LiveStreamLoadResponse,
    ExtractorLink,
    SubtitleFile,
)
from todtv.core.extractors import ExtractorApi, ExtractorRegistry, load_extractor
from todtv.core.plugin_manager import PluginManager
from todtv.core.utils import setup_logging

__all__ = [
    # Data Models
    "TvType",
    "Quality",
    "SearchResult",
    "HomePageList",
    "HomePageResponse",
    "MainPageRequest",
    "Episode",
    "LoadResponse",
    "MovieLoadResponse",
    "TvSeriesLoadResponse",
    "LiveStreamLoadResponse",
    "ExtractorLink",
    "SubtitleFile",
    # Extractors
    "ExtractorApi",
    "ExtractorRegistry",
    "load_extractor",
    # Plugin Management
    "PluginManager",
    # Logging
    "setup_logging",
    # Exceptions
    "TodTvError",
    "ConfigurationError",
    "PluginError",
    "NetworkError",
    "ExtractorError",
]
