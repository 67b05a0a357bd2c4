from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from lazywire._internal.references import ByFactory, ByName, ModuleKey, ModuleRef


@dataclass(kw_only=True, slots=True)
class Declaration:
    """Describe how a single module id is produced and cached.

    A declaration is created by registration and mutated in place by
    resolution, which stores ``value`` and flips ``resolved`` exactly once.
    """

    id: str
    """The module id this declaration is registered under."""
    factory: Callable[..., Any]
    """Called with resolved dependency values, positionally, in declared order."""
    dependencies: tuple[ModuleKey, ...] = ()
    """Declared dependency keys: module ids or factory references."""
    value: Any = field(default=None, repr=False)
    """The memoized factory result. Meaningful only when ``resolved`` is true."""
    resolved: bool = False
    """True once the factory ran and ``value`` holds its result."""

    def store(self, value: Any) -> Any:
        self.value = value
        self.resolved = True
        return value


class Registry:
    """Store declarations indexed by module id and by factory identity.

    Ids are unique: adding a declaration for an existing id replaces the
    previous one, including its cached value. Iteration follows registration
    order, and a replaced id keeps its original position.
    """

    def __init__(self) -> None:
        self._declarations: dict[str, Declaration] = {}
        self._ids_by_factory: dict[int, str] = {}

    def add(self, declaration: Declaration) -> Declaration | None:
        """Add a declaration, returning the one it replaced, if any.

        Args:
            declaration: Declaration to register.

        """
        previous = self._declarations.get(declaration.id)
        self._declarations[declaration.id] = declaration
        if previous is not None:
            self._reindex(previous.factory)
        if id(declaration.factory) in self._ids_by_factory:
            self._reindex(declaration.factory)
        else:
            self._ids_by_factory[id(declaration.factory)] = declaration.id
        return previous

    def find(self, ref: ModuleRef) -> Declaration | None:
        """Get a declaration by name or by factory identity, if it exists.

        Args:
            ref: Reference to look up.

        """
        if isinstance(ref, ByName):
            return self._declarations.get(ref.name)
        return self.find_by_factory(ref.factory)

    def get_by_id(self, module_id: str) -> Declaration:
        """Get a registered declaration by id.

        Args:
            module_id: Registered module id.

        """
        return self._declarations[module_id]

    def find_by_factory(self, factory: Callable[..., Any]) -> Declaration | None:
        module_id = self._ids_by_factory.get(id(factory))
        if module_id is None:
            return None
        return self._declarations[module_id]

    def id_of(self, key: ModuleKey) -> str | None:
        """Return the registered id a dependency key points to, if any."""
        if isinstance(key, str):
            return key if key in self._declarations else None
        declaration = self.find(ByFactory(key))
        return declaration.id if declaration is not None else None

    def ids(self) -> list[str]:
        return list(self._declarations)

    def _reindex(self, factory: Callable[..., Any]) -> None:
        """Point a factory's identity at the first declaration still using it."""
        self._ids_by_factory.pop(id(factory), None)
        for declaration in self._declarations.values():
            if declaration.factory is factory:
                self._ids_by_factory[id(factory)] = declaration.id
                return

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)
