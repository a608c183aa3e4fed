"""
TOD TV Plugin - Content provider plugin for todtv.com.tr

This plugin provides the home page catalog, search, movie/series/live
details and stream link resolution for todtv.com.tr.
"""

from .plugin import TodTvPlugin, plugin_metadata, default_config, SUPPORTED_TYPES
from .config import TodTvConfig, get_default_config, validate_config
from .api import TodTvApi, VideoResponse
from .parser import TodTvParser

__all__ = [
    "TodTvPlugin",
    "plugin_metadata",
    "default_config",
    "SUPPORTED_TYPES",
    "TodTvConfig",
    "get_default_config",
    "validate_config",
    "TodTvApi",
    "VideoResponse",
    "TodTvParser",
]
