"""Dynamic plugin discovery and loading."""

from condition_core.plugins.loader import PluginLoader, PluginNotFoundError

__all__ = ["PluginLoader", "PluginNotFoundError"]
