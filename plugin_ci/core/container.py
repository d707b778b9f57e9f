"""
Service container for plugin-ci.

The container holds two things:

- shared services (the logger) behind dependency-injector providers,
  resolved by interface
- named backend registries for object stores and VCS providers, filled in
  by plugin discovery and looked up by the name configured in settings
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from dependency_injector import providers

from .interfaces.store import IObjectStore
from .interfaces.vcs import IVCSProvider

T = TypeVar("T")
B = TypeVar("B")


class BackendRegistry(Generic[B]):
    """Backend classes by name (``local``, ``sql``, ``git``...)."""

    def __init__(self, kind: str):
        self.kind = kind
        self._classes: dict[str, type[B]] = {}

    def register(self, name: str, cls: type[B]) -> None:
        self._classes[name] = cls

    def get(self, name: str) -> type[B]:
        """
        Raises:
            KeyError: If nothing is registered under ``name``
        """
        try:
            return self._classes[name]
        except KeyError:
            raise KeyError(f"No {self.kind} registered: {name}") from None

    def names(self) -> list[str]:
        return sorted(self._classes)

    def __contains__(self, name: object) -> bool:
        return name in self._classes


class ServiceContainer:
    """Process-wide services and backend registries for one CLI run."""

    _instance: ServiceContainer | None = None

    def __init__(self) -> None:
        self._services: dict[type, providers.Provider] = {}
        self.stores: BackendRegistry[IObjectStore] = BackendRegistry("object store backend")
        self.vcs: BackendRegistry[IVCSProvider] = BackendRegistry("VCS provider")

    @classmethod
    def get_instance(cls) -> ServiceContainer:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the global container (for testing)."""
        cls._instance = None

    def provide(
        self,
        interface: type[T],
        instance: T | None = None,
        factory: Callable[[], T] | None = None,
    ) -> None:
        """
        Register a shared service.

        A factory is called once, on first resolve.
        """
        if instance is not None:
            self._services[interface] = providers.Object(instance)
        elif factory is not None:
            self._services[interface] = providers.Singleton(factory)
        else:
            raise ValueError("Must provide either an instance or a factory")

    def resolve(self, interface: type[T]) -> T:
        """
        Raises:
            KeyError: If no service is registered for ``interface``
        """
        if interface not in self._services:
            raise KeyError(f"No provider registered for: {interface}")
        return self._services[interface]()

    def try_resolve(self, interface: type[T]) -> T | None:
        if interface not in self._services:
            return None
        return self._services[interface]()

    def get_store_backend(self, name: str) -> type[IObjectStore]:
        return self.stores.get(name)

    def get_vcs_provider(self, name: str = "git") -> IVCSProvider:
        """Instantiate the VCS provider registered under ``name``."""
        return self.vcs.get(name)()


def get_container() -> ServiceContainer:
    """Get the global service container instance."""
    return ServiceContainer.get_instance()


def resolve(interface: type[T]) -> T:
    return get_container().resolve(interface)


def try_resolve(interface: type[T]) -> T | None:
    return get_container().try_resolve(interface)


def resolve_or_default(interface: type[T], default_factory: Callable[[], T]) -> T:
    """
    Resolve a service, or build ``default_factory()`` when none is registered.

    Library code and tests run without bootstrapping; they get the default.
    """
    instance = try_resolve(interface)
    if instance is not None:
        return instance
    return default_factory()
