from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, overload

from lazywire._internal.references import ByName, ModuleKey, derive_module_id, module_ref
from lazywire._internal.registry import Declaration, Registry
from lazywire._internal.resolver import Resolver
from lazywire.dependencies import declared_dependencies
from lazywire.exceptions import LazyWireInvalidKeyError, LazyWireInvalidRegistrationError

logger = logging.getLogger(__name__)


class Container:
    """Register factories by name and resolve them lazily.

    Each module is a factory plus the ordered keys of the modules it needs.
    ``get`` builds a module on first request, feeding it its dependencies as
    positional arguments, and caches the result for the container lifetime.
    ``validate`` checks the whole graph for cycles and missing modules
    without calling any factory; call it before ``get`` whenever the graph
    is not known to be acyclic.

    Containers are single threaded. Registering from inside a running
    factory is not allowed.
    """

    def __init__(self, name: str | None = None) -> None:
        """Initialize an empty container.

        Args:
            name: Optional container name, used only in diagnostics.

        Examples:
            .. code-block:: python

                container = Container("app")
                container.register("config", lambda: {"debug": True})
                container.register("app", ["config"], App)
                container.validate()
                app = container.get("app")

        """
        self._name = name
        self._registry = Registry()
        self._resolver = Resolver(self._registry, name)

    @property
    def name(self) -> str | None:
        return self._name

    # region Registration
    @overload
    def register(self, factory: Callable[..., Any], /) -> Container: ...

    @overload
    def register(self, module_id: str, factory: Callable[..., Any], /) -> Container: ...

    @overload
    def register(
        self,
        module_id: str,
        dependencies: ModuleKey | Sequence[ModuleKey],
        factory: Callable[..., Any],
        /,
    ) -> Container: ...

    def register(
        self,
        key: str | Callable[..., Any],
        dependencies: ModuleKey | Sequence[ModuleKey] | None = None,
        factory: Callable[..., Any] | None = None,
        /,
    ) -> Container:
        """Register a factory under a module id.

        Accepted forms are ``register(id, dependencies, factory)``,
        ``register(id, factory)`` and ``register(factory)``. Without an
        explicit dependency list the factory's attached list (see
        ``lazywire.dependency``) is used. A bare factory is registered under
        its own ``__name__``.

        Re-registering an id replaces the previous declaration and its
        cached value, and logs a warning.

        Args:
            key: Module id, or the factory itself.
            dependencies: Dependency keys, a single key, or the factory when
                called as ``register(id, factory)``.
            factory: Factory producing the module value.

        Returns:
            The container, so registrations can be chained.

        Raises:
            LazyWireInvalidRegistrationError: If arguments do not match an
                accepted form, or if called while one of this container's
                factories is running.

        """
        if self._resolver.is_running_factory:
            msg = f"Cannot register {key!r} while a factory is running{self._suffix()}."
            raise LazyWireInvalidRegistrationError(msg)

        if factory is None and isinstance(key, str) and callable(dependencies):
            factory, dependencies = dependencies, None

        if factory is None:
            if isinstance(key, str) or not callable(key) or dependencies is not None:
                msg = f"Registration of {key!r} requires a callable factory."
                raise LazyWireInvalidRegistrationError(msg)
            factory = key
            key = derive_module_id(factory)

        if not isinstance(key, str):
            msg = f"Module id must be a string, got {key!r}."
            raise LazyWireInvalidRegistrationError(msg)
        if not callable(factory):
            msg = f"Factory for {key!r} must be callable, got {factory!r}."
            raise LazyWireInvalidRegistrationError(msg)

        declaration = Declaration(
            id=key,
            factory=factory,
            dependencies=self._normalize_dependencies(key, factory, dependencies),
        )
        if self._registry.add(declaration) is not None:
            logger.warning("Overriding module %r%s", key, self._suffix())
        return self

    def _normalize_dependencies(
        self,
        module_id: str,
        factory: Callable[..., Any],
        dependencies: ModuleKey | Sequence[ModuleKey] | None,
    ) -> tuple[ModuleKey, ...]:
        if dependencies is None:
            keys: Sequence[Any] = declared_dependencies(factory)
        elif isinstance(dependencies, str) or callable(dependencies):
            keys = [dependencies]
        elif isinstance(dependencies, (list, tuple)):
            keys = dependencies
        else:
            msg = (
                f"Dependencies of {module_id!r} must be a module id, a factory, or a "
                f"list/tuple of them, got {dependencies!r}."
            )
            raise LazyWireInvalidRegistrationError(msg)

        for dependency_key in keys:
            if not isinstance(dependency_key, str) and not callable(dependency_key):
                msg = (
                    f"Dependency {dependency_key!r} of {module_id!r} must be a module id "
                    "or a factory."
                )
                raise LazyWireInvalidRegistrationError(msg)
        return tuple(keys)

    # endregion Registration

    # region Resolution
    @overload
    def get(self, key: str | Callable[..., Any]) -> Any: ...

    @overload
    def get(self, key: list[str] | tuple[str, ...]) -> dict[str, Any]: ...

    def get(self, key: Any) -> Any:
        """Resolve a module, or a batch of modules by id.

        Modules are built on first request together with whatever they
        depend on; later requests return the cached value.

        Args:
            key: Module id, registered factory, or a list/tuple of module ids.

        Returns:
            The module value, or a ``{id: value}`` dict for a batch.

        Raises:
            LazyWireMissingDependencyError: If a requested module or any
                module in its dependency chain is not registered. A batch
                fails as a whole.
            LazyWireInvalidKeyError: If ``key`` has an unsupported type.

        """
        if isinstance(key, (list, tuple)):
            for module_id in key:
                if not isinstance(module_id, str):
                    msg = f"Batch lookups accept module ids only, got {module_id!r}."
                    raise LazyWireInvalidKeyError(msg)
            return {module_id: self._resolver.resolve(ByName(module_id)) for module_id in key}
        return self._resolver.resolve(module_ref(key))

    def accessor(self) -> Accessor:
        """Return a read-only handle that resolves from this container."""
        return Accessor(self)

    # endregion Resolution

    def validate(self) -> bool:
        """Check the dependency graph without calling any factory.

        Cycles are reported first. Missing dependencies are only reported
        when the graph has no cycle.

        Returns:
            ``True`` when the graph is complete and acyclic.

        Raises:
            LazyWireValidationError: Wrapping every
                ``LazyWireCyclicDependencyError`` found, or otherwise every
                ``LazyWireMissingDependencyError``.

        """
        return self._resolver.validate()

    def _suffix(self) -> str:
        return f" in container {self._name!r}" if self._name else ""

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r}, modules={len(self._registry)})"


class Accessor:
    """Read-only callable proxy to ``Container.get``."""

    __slots__ = ("_container",)

    def __init__(self, container: Container) -> None:
        self._container = container

    def __call__(self, key: Any) -> Any:
        return self._container.get(key)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._container!r})"
