"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from the project's local plugin directory.
"""

from dropctl.plugins.hookspecs import hookimpl
from dropctl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
