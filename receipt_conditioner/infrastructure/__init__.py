"""Infrastructure - plugin discovery."""

from .plugin_registry import PluginRegistry

__all__ = ['PluginRegistry']
