from __future__ import annotations

from collections.abc import Sequence


def _container_suffix(container_name: str | None) -> str:
    return f" in container {container_name!r}" if container_name else ""


class LazyWireError(Exception):
    """Represent a base class for all lazywire-specific failures.

    Catch this type when you want to handle any lazywire error path without
    matching each concrete exception class individually. Exceptions raised by
    user factories are never wrapped in it.
    """


class LazyWireInvalidRegistrationError(LazyWireError):
    """Signal an invalid ``Container.register`` call.

    Raised when the id is not a string, when the factory is missing or not
    callable, and when a factory registers into the container that is
    currently running it.

    Typical fixes include passing ``(id, dependencies, factory)``,
    ``(id, factory)`` or a bare named factory, and moving registrations out
    of factory bodies.
    """


class LazyWireInvalidKeyError(LazyWireError):
    """Signal a lookup key ``Container.get`` does not understand.

    Valid keys are a module id string, a registered factory, or a list/tuple
    of module id strings. Factories are not accepted inside a batch lookup.
    """


class LazyWireMissingDependencyError(LazyWireError):
    """Signal that a requested module id or factory has no declaration.

    Raised by ``Container.get`` on the first missing key it meets, and
    collected by ``Container.validate`` for every registered module whose
    dependency chain reaches an unregistered key.

    Attributes:
        parent: Id of the module that declared the dependency, or ``None``
            when the missing key was requested directly.
        module: Display name of the missing key.
        container_name: Name of the container, if any.

    """

    def __init__(
        self,
        module: str,
        parent: str | None = None,
        container_name: str | None = None,
    ) -> None:
        self.module = module
        self.parent = parent
        self.container_name = container_name
        owner = f" of {parent!r}" if parent else ""
        super().__init__(
            f"Missing dependency {module!r}{owner}{_container_suffix(container_name)}",
        )


class LazyWireCyclicDependencyError(LazyWireError):
    """Signal a circular chain of declared dependencies.

    Only ``Container.validate`` raises this (wrapped in
    ``LazyWireValidationError``); ``Container.get`` has no cycle guard.

    Attributes:
        path: Module ids forming the cycle, in traversal order. The last id
            depends on the first.
        module: First id of ``path``.
        container_name: Name of the container, if any.

    """

    def __init__(self, path: Sequence[str], container_name: str | None = None) -> None:
        self.path = tuple(path)
        self.module = self.path[0]
        self.container_name = container_name
        rendered = " -> ".join((*self.path, self.module))
        super().__init__(
            f"Cyclic dependency detected{_container_suffix(container_name)}: {rendered}",
        )


class LazyWireValidationError(LazyWireError):
    """Signal that ``Container.validate`` found one or more graph problems.

    The message joins every individual message; ``errors`` keeps the
    individual ``LazyWireCyclicDependencyError`` or
    ``LazyWireMissingDependencyError`` instances in discovery order.
    """

    def __init__(self, errors: Sequence[LazyWireError]) -> None:
        self.errors = list(errors)
        super().__init__("\n\t".join(str(error) for error in self.errors))
