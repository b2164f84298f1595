"""Extension layer over pluggy.

Plugins are discovered from the ``frontiermetrix.plugins`` entry-point group
and the project's local plugin directory. Plugin failures are warnings,
never errors.
"""

from frontiermetrix.plugins.event_bus import EventBus
from frontiermetrix.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager"]
