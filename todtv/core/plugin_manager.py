"""
Plugin Manager - Provider discovery and dispatch.

This module plays the host's part of the provider contract: it discovers
provider plugins, instantiates them with their configuration and drives
their main page, search, load and link resolution operations.
"""

import asyncio
import importlib
import inspect
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from todtv.core.exceptions import ConfigurationError, PluginError
from todtv.core.models import (
    HomePageResponse,
    LinkCallback,
    LoadResponse,
    MainPageRequest,
    SearchResult,
    SubtitleCallback,
)
from todtv.plugins.base import BasePlugin


logger = logging.getLogger(__name__)

PLUGINS_PACKAGE = "todtv.plugins"


class PluginManager:
    """
    Manages provider plugins with discovery, loading and dispatch.

    Plugins are keyed by the stem of their entry point module, for
    example ``todtv_plugin``.
    """

    def __init__(
        self,
        plugin_configs: Optional[Dict[str, Dict[str, Any]]] = None,
        plugins_dir: Optional[Path] = None,
    ):
        """
        Initialize plugin manager.

        Args:
            plugin_configs: Per-plugin configuration dictionaries
            plugins_dir: Directory containing plugin entry modules
                (defaults to the ``todtv/plugins`` package directory)
        """
        self.plugin_configs = plugin_configs or {}
        self.plugins_dir = plugins_dir or Path(__file__).parent.parent / "plugins"

        self._available_plugins: Dict[str, Type[BasePlugin]] = {}
        self._loaded_plugins: Dict[str, BasePlugin] = {}
        self._plugin_errors: Dict[str, Exception] = {}

        self._discovery_complete = False

    async def discover_plugins(self) -> None:
        """
        Discover available plugins in the plugins directory.

        Scans the directory for modules containing concrete BasePlugin
        subclasses and registers them for loading.
        """
        if not self.plugins_dir.exists():
            logger.warning(f"Plugins directory does not exist: {self.plugins_dir}")
            return

        logger.info(f"Scanning {self.plugins_dir} for provider plugins")

        self._available_plugins.clear()
        self._plugin_errors.clear()

        plugin_files = [
            f for f in sorted(self.plugins_dir.glob("*.py"))
            if f.name not in ["__init__.py", "base.py"] and not f.name.startswith("_")
        ]

        for plugin_file in plugin_files:
            try:
                self._discover_plugin_module(plugin_file)
            except PluginError as e:
                self._plugin_errors[plugin_file.stem] = e
                logger.error(f"Failed to discover plugin {plugin_file.stem}: {e}")

        self._discovery_complete = True
        logger.info(f"Plugin discovery complete: {len(self._available_plugins)} plugins found")

    def _discover_plugin_module(self, plugin_file: Path) -> None:
        """
        Discover the plugin class in a specific module file.

        Args:
            plugin_file: Path to the plugin module file
        """
        module_name = f"{PLUGINS_PACKAGE}.{plugin_file.stem}"

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise PluginError(f"Failed to import plugin module {module_name}: {e}", plugin_name=plugin_file.stem)

        for _, obj in inspect.getmembers(module, inspect.isclass):
            if (issubclass(obj, BasePlugin) and
                    obj is not BasePlugin and
                    not inspect.isabstract(obj)):
                self._available_plugins[plugin_file.stem] = obj
                logger.debug(f"Discovered plugin: {plugin_file.stem} ({obj.__name__})")
                return

        logger.warning(f"{plugin_file.name} defines no concrete provider class")

    @property
    def available_plugins(self) -> List[str]:
        return list(self._available_plugins)

    def is_enabled(self, plugin_name: str) -> bool:
        """Plugins are enabled unless their config says otherwise."""
        return bool(self.plugin_configs.get(plugin_name, {}).get("enabled", True))

    async def load_plugin(self, plugin_name: str) -> Optional[BasePlugin]:
        """
        Load a specific plugin by name.

        Args:
            plugin_name: Name of the plugin to load

        Returns:
            Loaded plugin instance or None if loading failed
        """
        if plugin_name in self._loaded_plugins:
            return self._loaded_plugins[plugin_name]

        if not self._discovery_complete:
            await self.discover_plugins()

        if plugin_name not in self._available_plugins:
            logger.error(f"Unknown provider plugin: {plugin_name}")
            return None

        try:
            plugin_class = self._available_plugins[plugin_name]
            plugin_instance = plugin_class(config=self.plugin_configs.get(plugin_name, {}))
        except ConfigurationError as e:
            self._plugin_errors[plugin_name] = e
            logger.error(f"Failed to load plugin {plugin_name}: {e}")
            return None

        self._loaded_plugins[plugin_name] = plugin_instance
        logger.info(f"Loaded provider plugin: {plugin_name}")
        return plugin_instance

    async def _require_plugin(self, plugin_name: str) -> BasePlugin:
        plugin = await self.load_plugin(plugin_name)
        if plugin is None:
            raise PluginError(f"Plugin {plugin_name} is not available", plugin_name=plugin_name)
        return plugin

    async def get_active_plugins(self) -> Dict[str, BasePlugin]:
        """
        Get all enabled plugins, loading them as needed.

        Returns:
            Dictionary of plugin name to plugin instance
        """
        if not self._discovery_complete:
            await self.discover_plugins()

        active_plugins = {}
        for plugin_name in self._available_plugins:
            if not self.is_enabled(plugin_name):
                continue
            plugin = await self.load_plugin(plugin_name)
            if plugin is not None:
                active_plugins[plugin_name] = plugin

        return active_plugins

    async def get_main_page(
        self,
        plugin_name: str,
        page: int = 1,
        request: Optional[MainPageRequest] = None,
    ) -> HomePageResponse:
        """
        Get a main page listing from a specific plugin.

        Raises:
            PluginError: If the plugin is not available or fails
        """
        plugin = await self._require_plugin(plugin_name)
        if not plugin.metadata.has_main_page:
            return HomePageResponse()

        request = request or plugin.main_page_requests[0]
        try:
            return await plugin.get_main_page(page, request)
        except Exception as e:
            self._plugin_errors[plugin_name] = e
            raise PluginError(f"Failed to get main page from {plugin_name}: {e}", plugin_name=plugin_name)

    async def search_all(
        self,
        query: str,
        max_concurrent: int = 5,
    ) -> Dict[str, List[SearchResult]]:
        """
        Search across all active plugins concurrently.

        A failing plugin contributes an empty list and is recorded in the
        plugin status instead of failing the whole search.

        Args:
            query: Search query string
            max_concurrent: Maximum number of concurrent plugin searches

        Returns:
            Dictionary mapping plugin names to their search results
        """
        active_plugins = await self.get_active_plugins()

        if not active_plugins:
            logger.warning("No enabled providers to search")
            return {}

        semaphore = asyncio.Semaphore(max_concurrent)

        async def search_plugin(name: str, plugin: BasePlugin) -> tuple:
            """Search one provider; a failure yields no results."""
            async with semaphore:
                if not plugin.metadata.has_search:
                    return name, []
                try:
                    logger.debug(f"{name}: searching '{query}'")
                    results = await plugin.search(query)
                    logger.debug(f"{name}: {len(results)} results")
                    return name, results
                except Exception as e:
                    logger.error(f"Search failed in {name}: {e}")
                    self._plugin_errors[name] = e
                    return name, []

        results = await asyncio.gather(*[
            search_plugin(name, plugin)
            for name, plugin in active_plugins.items()
        ])

        search_results = dict(results)
        total_results = sum(len(items) for items in search_results.values())
        logger.info(f"Search for '{query}' returned {total_results} results from {len(search_results)} providers")

        return search_results

    async def load(self, plugin_name: str, url: str) -> Optional[LoadResponse]:
        """
        Load a title page through a specific plugin.

        Raises:
            PluginError: If the plugin is not available or fails
        """
        plugin = await self._require_plugin(plugin_name)
        try:
            return await plugin.load(url)
        except Exception as e:
            self._plugin_errors[plugin_name] = e
            raise PluginError(f"Failed to load {url} with {plugin_name}: {e}", plugin_name=plugin_name)

    async def load_links(
        self,
        plugin_name: str,
        data: str,
        subtitle_callback: SubtitleCallback,
        callback: LinkCallback,
        is_casting: bool = False,
    ) -> bool:
        """
        Resolve stream links through a specific plugin.

        Raises:
            PluginError: If the plugin is not available or fails
        """
        plugin = await self._require_plugin(plugin_name)
        try:
            return await plugin.load_links(data, is_casting, subtitle_callback, callback)
        except Exception as e:
            self._plugin_errors[plugin_name] = e
            raise PluginError(f"Failed to load links for {data} with {plugin_name}: {e}", plugin_name=plugin_name)

    def get_plugin_status(self) -> Dict[str, Any]:
        """
        Get status information for all plugins.

        Returns:
            Dictionary containing plugin status information
        """
        status: Dict[str, Any] = {
            "discovered": len(self._available_plugins),
            "loaded": len(self._loaded_plugins),
            "errors": len(self._plugin_errors),
            "plugins": {}
        }

        for name, plugin_class in self._available_plugins.items():
            plugin_info: Dict[str, Any] = {
                "class": plugin_class.__name__,
                "loaded": name in self._loaded_plugins,
                "enabled": self.is_enabled(name),
                "error": None
            }

            if name in self._plugin_errors:
                plugin_info["error"] = str(self._plugin_errors[name])

            if name in self._loaded_plugins:
                plugin_info["metadata"] = self._loaded_plugins[name].metadata.model_dump(mode="json")

            status["plugins"][name] = plugin_info

        return status

    async def cleanup(self) -> None:
        """Clean up all loaded plugins."""
        logger.info("Closing provider sessions")

        if self._loaded_plugins:
            await asyncio.gather(
                *[plugin.cleanup() for plugin in self._loaded_plugins.values()],
                return_exceptions=True
            )

        self._loaded_plugins.clear()
        logger.info("Provider sessions closed")


# Export plugin manager
__all__ = ["PluginManager"]
