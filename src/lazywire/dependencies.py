from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from lazywire._internal.references import ModuleKey
from lazywire.exceptions import LazyWireInvalidRegistrationError

F = TypeVar("F", bound=Callable[..., Any])

DEPENDENCY_ATTRIBUTE = "__lazywire_dependencies__"
"""Attribute holding the dependency keys declared on a factory."""


def dependency(factory: F, dependencies: ModuleKey | Sequence[ModuleKey]) -> F:
    """Declare dependencies on a factory ahead of registration.

    ``Container.register`` reads the attached list whenever it is called
    without an explicit dependency list. Repeated calls append to the list
    in call order, they never replace it.

    Args:
        factory: Factory function to annotate.
        dependencies: One module id or factory reference, or a sequence of
            them.

    Returns:
        The same factory, so the call can be chained or used inline.

    Raises:
        LazyWireInvalidRegistrationError: If the factory does not accept new
            attributes, as with bound methods and builtins.

    Examples:
        .. code-block:: python

            def service(db, cache): ...


            dependency(service, ["db", "cache"])
            container.register(service)

    """
    attached = declared_dependencies(factory)
    if isinstance(dependencies, str) or callable(dependencies):
        attached.append(dependencies)
    else:
        attached.extend(dependencies)
    try:
        setattr(factory, DEPENDENCY_ATTRIBUTE, attached)
    except AttributeError as error:
        msg = (
            f"Cannot attach dependencies to {factory!r}; only plain functions, classes and "
            "callables with a writable __dict__ are supported."
        )
        raise LazyWireInvalidRegistrationError(msg) from error
    return factory


def depends_on(*dependencies: ModuleKey) -> Callable[[F], F]:
    """Decorator form of ``dependency``.

    Examples:
        .. code-block:: python

            @depends_on("db", "cache")
            def service(db, cache): ...

    """

    def decorator(factory: F) -> F:
        return dependency(factory, dependencies)

    return decorator


def declared_dependencies(factory: Callable[..., Any]) -> list[ModuleKey]:
    """Return the dependency list attached to a factory, or an empty one."""
    return list(getattr(factory, DEPENDENCY_ATTRIBUTE, ()))
