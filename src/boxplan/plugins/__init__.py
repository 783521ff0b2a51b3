"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) and single-file plugins in
``.boxplan/plugins/``. Hooks are dispatched synchronously.
INVARIANT: Plugin failures are warnings, never errors.
"""

from boxplan.plugins.hookspecs import hookimpl
from boxplan.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
