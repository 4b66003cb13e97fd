"""Dynamic plugin discovery and loading via entry points."""

from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from condition_core.interfaces import Condition, ConditionServices, ModuleResolver, PermissionCatalog

if TYPE_CHECKING:
    from condition_core.config.models import ConditionsConfig

logger = logging.getLogger(__name__)


class PluginNotFoundError(Exception):
    """Raised when a requested plugin cannot be found."""

    def __init__(self, plugin_type: str, name: str | None = None):
        self.plugin_type = plugin_type
        self.name = name
        msg = f"No {plugin_type} plugin found"
        if name:
            msg += f" with name '{name}'"
        super().__init__(msg)


class PluginLoader:
    """Discovers and loads plugins via entry points or config."""

    # Entry point group names
    GROUPS = {
        "condition": "conditions.plugins.condition",
        "catalog": "conditions.plugins.catalog",
        "resolver": "conditions.plugins.resolver",
    }

    # Lite defaults (lazy import paths)
    LITE_DEFAULTS = {
        "catalog": ("condition_lite.registry", "StaticPermissionCatalog"),
        "resolver": ("condition_lite.registry", "StaticModuleResolver"),
    }

    # Condition plugins shipped in this distribution, by plugin id
    BUILTIN_CONDITIONS = {
        "user_permission": ("user_permission_condition.condition", "UserPermissionCondition"),
    }

    def __init__(self, config: ConditionsConfig):
        self._config = config

    def discover(self) -> dict[str, list[str]]:
        """Scan entry_points for registered plugins. Returns {type: [name, ...]}."""
        result: dict[str, list[str]] = {}
        for plugin_type, group in self.GROUPS.items():
            eps = importlib.metadata.entry_points(group=group)
            result[plugin_type] = [ep.name for ep in eps]
        return result

    def _resolve_name(self, plugin_type: str, name: str | None) -> str | None:
        """Resolve plugin name: explicit arg > config > None."""
        if name is not None:
            return name
        return getattr(self._config.plugins, plugin_type, None)

    def _load_from_entry_point(self, plugin_type: str, name: str) -> object | None:
        """Try to load a specific named entry point."""
        group = self.GROUPS[plugin_type]
        eps = importlib.metadata.entry_points(group=group)
        for ep in eps:
            if ep.name == name:
                return ep.load()
        return None

    @staticmethod
    def _import(module_path: str, class_name: str) -> object | None:
        try:
            module = __import__(module_path, fromlist=[class_name])
            return getattr(module, class_name)
        except (ImportError, AttributeError):
            return None

    def _load_lite_default(self, plugin_type: str) -> object | None:
        """Try to import the Lite default for this plugin type."""
        if plugin_type not in self.LITE_DEFAULTS:
            return None
        return self._import(*self.LITE_DEFAULTS[plugin_type])

    def _load_plugin(self, plugin_type: str, name: str | None) -> object | None:
        """Fallback chain: name/config > entry_points > Lite defaults."""
        resolved = self._resolve_name(plugin_type, name)
        if resolved is not None:
            result = self._load_from_entry_point(plugin_type, resolved)
            if result is not None:
                return result
            # Name was explicit but not found -- don't fallback silently
            raise PluginNotFoundError(plugin_type, resolved)

        # No explicit name -- try Lite defaults
        return self._load_lite_default(plugin_type)

    def load_catalog(self, name: str | None = None) -> type[PermissionCatalog]:
        plugin_cls = self._load_plugin("catalog", name)
        if plugin_cls is None:
            raise PluginNotFoundError("catalog", name)
        return plugin_cls

    def load_resolver(self, name: str | None = None) -> type[ModuleResolver]:
        plugin_cls = self._load_plugin("resolver", name)
        if plugin_cls is None:
            raise PluginNotFoundError("resolver", name)
        return plugin_cls

    def load_condition(self, plugin_id: str) -> type[Condition]:
        """Load a condition plugin class by id. Built-in plugins back up entry points."""
        plugin_cls = self._load_from_entry_point("condition", plugin_id)
        if plugin_cls is None and plugin_id in self.BUILTIN_CONDITIONS:
            plugin_cls = self._import(*self.BUILTIN_CONDITIONS[plugin_id])
        if plugin_cls is None:
            raise PluginNotFoundError("condition", plugin_id)
        return plugin_cls

    def create_condition(
        self,
        plugin_id: str,
        services: ConditionServices,
        configuration: Mapping[str, Any] | None = None,
    ) -> Condition:
        """Instantiate a condition plugin through its ``create`` factory."""
        plugin_cls = self.load_condition(plugin_id)
        logger.debug("Creating condition %s with %s", plugin_id, dict(configuration or {}))
        return plugin_cls.create(services, configuration, plugin_id)
