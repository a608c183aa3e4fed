"""
TOD TV Plugin Entry Point

This module serves as the discovery entry point for the TOD TV plugin,
importing the main plugin class from the todtv subpackage.
"""

from todtv.plugins.todtv.plugin import TodTvPlugin

# Export the plugin class for discovery
__all__ = ["TodTvPlugin"]
