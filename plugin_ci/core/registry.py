"""
Backend discovery.

Object store backends and VCS providers are found in two places:

1. Modules under ``plugin_ci.plugins.store`` and ``plugin_ci.plugins.vcs``
2. The ``plugin_ci.plugins`` entry point group of installed packages, so
   that a cloud bucket backend can ship separately:

       [project.entry-points."plugin_ci.plugins"]
       s3 = "my_package.store:S3ObjectStore"
"""

import importlib
import inspect
import pkgutil
from importlib.metadata import entry_points

from .container import ServiceContainer, get_container, resolve_or_default
from .interfaces.logger import ILogger
from .interfaces.store import IObjectStore
from .interfaces.vcs import IVCSProvider

ENTRY_POINT_GROUP = "plugin_ci.plugins"
BUILTIN_SUBPACKAGES = ("store", "vcs")


def _get_logger() -> ILogger:
    from ..services.logging import NullLogger

    return resolve_or_default(ILogger, NullLogger)  # type: ignore[type-abstract]


def discover_plugins(package_name: str = "plugin_ci.plugins") -> list[str]:
    """
    Register every built-in and entry point backend with the container.

    Returns:
        Names registered, as ``<kind>:<name>``
    """
    container = get_container()
    registered: list[str] = []
    for subpackage in BUILTIN_SUBPACKAGES:
        package = importlib.import_module(f"{package_name}.{subpackage}")
        for cls in _iter_module_classes(package):
            name = register_backend(container, cls)
            if name:
                registered.append(name)

    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            cls = ep.load()
        except Exception as e:
            # A broken third-party backend must not break the pipeline
            _get_logger().warning("Failed to load backend entry point %s: %s", ep.name, e)
            continue
        name = register_backend(container, cls)
        if name:
            registered.append(name)

    _get_logger().debug("Registered backends: %s", ", ".join(registered))
    return registered


def _iter_module_classes(package):
    for module_info in pkgutil.iter_modules(package.__path__):
        if module_info.name.startswith("_") or module_info.name == "base":
            continue
        module = importlib.import_module(f"{package.__name__}.{module_info.name}")
        for _attr, value in inspect.getmembers(module, inspect.isclass):
            if value.__module__ == module.__name__:
                yield value


def register_backend(container: ServiceContainer, cls: type) -> str | None:
    """
    Register ``cls`` if it is a concrete store backend or VCS provider.

    Stores are registered under their ``backend_name``; VCS providers
    under the ``name`` of an instance.
    """
    if not inspect.isclass(cls) or inspect.isabstract(cls):
        return None

    if issubclass(cls, IObjectStore):
        backend = getattr(cls, "backend_name", None)
        if not backend:
            return None
        container.stores.register(backend, cls)
        return f"store:{backend}"

    if issubclass(cls, IVCSProvider):
        name = cls().name
        container.vcs.register(name, cls)
        return f"vcs:{name}"

    return None
