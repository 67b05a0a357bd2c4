from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias, Union

from lazywire.exceptions import LazyWireInvalidKeyError

ModuleKey: TypeAlias = Union[str, Callable[..., Any]]
"""A module id or a factory reference."""

_ANONYMOUS_NAMES = {"", "<lambda>"}


@dataclass(frozen=True, slots=True)
class ByName:
    """Reference a module by its registered id."""

    name: str

    @property
    def display_name(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True, eq=False)
class ByFactory:
    """Reference a module by the identity of its factory."""

    factory: Callable[..., Any]

    @property
    def display_name(self) -> str:
        return factory_name(self.factory) or repr(self.factory)


ModuleRef: TypeAlias = Union[ByName, ByFactory]


def module_ref(key: ModuleKey) -> ModuleRef:
    """Wrap a raw lookup key into a ``ModuleRef``.

    Raises:
        LazyWireInvalidKeyError: If the key is neither a string nor callable.

    """
    if isinstance(key, str):
        return ByName(key)
    if callable(key):
        return ByFactory(key)
    msg = f"Module key must be a string id or a factory, got {key!r}."
    raise LazyWireInvalidKeyError(msg)


def factory_name(factory: Callable[..., Any]) -> str | None:
    """Return the factory's own ``__name__``, or ``None`` when it is anonymous."""
    name = getattr(factory, "__name__", None)
    if not isinstance(name, str) or name in _ANONYMOUS_NAMES:
        return None
    return name


def derive_module_id(factory: Callable[..., Any]) -> str:
    """Build the id used when a factory is registered without an explicit one.

    Named factories use their ``__name__``. Anonymous ones get a name bound
    to their identity so that two lambdas never share an id.
    """
    return factory_name(factory) or f"<lambda>@{id(factory):#x}"
