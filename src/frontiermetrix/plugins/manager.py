"""Plugin registry over the frontiermetrix hook specs.

Plugins come from the ``frontiermetrix.plugins`` entry-point group of
installed distributions and from ``*.py`` files in the project's local
plugin directory. A local file may implement hooks as module-level
functions, as classes, or both. Anything that fails to import or construct
is logged and skipped.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterator
from importlib.metadata import entry_points
from pathlib import Path
from types import ModuleType

import pluggy

from frontiermetrix.plugins.hookspecs import FrontierHookSpec

ENTRY_POINT_GROUP = "frontiermetrix.plugins"
HOOK_NAMES = tuple(name for name in vars(FrontierHookSpec) if name.startswith("post_"))

logger = logging.getLogger(__name__)


class PluginManager:
    """Registered plugins and the hook relay that calls them."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager("frontiermetrix")
        self._pm.add_hookspecs(FrontierHookSpec)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def names(self) -> list[str]:
        return [name for name, _plugin in self._pm.list_name_plugin()]

    def register(self, plugin: object, name: str | None = None) -> str | None:
        """Register *plugin*, instantiating it first if it is a class.

        Returns the registered name, or None if pluggy blocked it.
        """
        if inspect.isclass(plugin):
            plugin = plugin()
        registered = self._pm.register(plugin, name=name or type(plugin).__name__)
        logger.debug("Registered plugin %s", registered)
        return registered

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def implements_hooks(self, obj: object) -> bool:
        """True if *obj* carries a ``@hookimpl`` for any frontiermetrix hook."""
        return any(
            self._pm.parse_hookimpl_opts(obj, name) is not None
            for name in HOOK_NAMES
            if hasattr(obj, name)
        )

    def load(self, *, local_dir: Path | None = None) -> list[str]:
        """Register entry-point plugins, then local ones. Returns all names."""
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            if self._pm.has_plugin(ep.name):
                continue
            try:
                self.register(ep.load(), name=ep.name)
            except Exception:
                logger.warning("Skipping plugin entry point %s", ep.name, exc_info=True)

        if local_dir is not None and local_dir.is_dir():
            for path in sorted(local_dir.glob("*.py")):
                if not path.name.startswith("_"):
                    self._load_file(path)
        return self.names

    def _load_file(self, path: Path) -> None:
        try:
            module = _import_file(path)
        except Exception:
            logger.warning("Skipping local plugin %s", path, exc_info=True)
            return

        for name, plugin in self._plugins_in(module, prefix=f"local:{path.stem}"):
            try:
                self.register(plugin, name=name)
            except Exception:
                logger.warning("Could not register %s from %s", name, path, exc_info=True)

    def _plugins_in(self, module: ModuleType, prefix: str) -> Iterator[tuple[str, object]]:
        if self.implements_hooks(module):
            yield prefix, module
        for cls_name, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ == module.__name__ and self.implements_hooks(cls):
                yield f"{prefix}.{cls_name}", cls


def _import_file(path: Path) -> ModuleType:
    module_name = f"_fmx_plugin_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Not an importable Python file: {path}"
        raise ImportError(msg)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module
