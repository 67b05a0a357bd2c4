from __future__ import annotations

import pytest

from lazywire._internal.references import ByFactory, ByName, derive_module_id, module_ref
from lazywire._internal.registry import Declaration, Registry
from lazywire._internal.resolver import Resolver
from lazywire.exceptions import LazyWireInvalidKeyError


def _factory() -> str:
    return "value"


def test_add_returns_replaced_declaration() -> None:
    registry = Registry()
    first = Declaration(id="x", factory=_factory)
    second = Declaration(id="x", factory=lambda: "other")

    assert registry.add(first) is None
    assert registry.add(second) is first
    assert registry.find(ByName("x")) is second
    assert len(registry) == 1


def test_replaced_id_keeps_registration_position() -> None:
    registry = Registry()
    registry.add(Declaration(id="a", factory=lambda: 1))
    registry.add(Declaration(id="b", factory=lambda: 2))
    registry.add(Declaration(id="a", factory=lambda: 3))

    assert registry.ids() == ["a", "b"]


def test_find_by_factory_uses_identity() -> None:
    registry = Registry()
    declaration = Declaration(id="x", factory=_factory)
    registry.add(declaration)

    assert registry.find(ByFactory(_factory)) is declaration
    assert registry.find(ByFactory(lambda: "value")) is None


def test_factory_index_falls_back_to_remaining_declaration() -> None:
    registry = Registry()
    registry.add(Declaration(id="a", factory=_factory))
    registry.add(Declaration(id="b", factory=_factory))
    registry.add(Declaration(id="a", factory=lambda: "replacement"))

    declaration = registry.find_by_factory(_factory)
    assert declaration is not None
    assert declaration.id == "b"


def test_id_of_resolves_names_and_factories() -> None:
    registry = Registry()
    registry.add(Declaration(id="x", factory=_factory))

    assert registry.id_of("x") == "x"
    assert registry.id_of(_factory) == "x"
    assert registry.id_of("y") is None
    assert registry.id_of(lambda: None) is None


def test_declaration_store_marks_resolved() -> None:
    declaration = Declaration(id="x", factory=_factory)

    assert declaration.resolved is False
    assert declaration.store("value") == "value"
    assert declaration.resolved is True
    assert declaration.value == "value"


def test_module_ref_dispatch() -> None:
    assert module_ref("x") == ByName("x")
    ref = module_ref(_factory)
    assert isinstance(ref, ByFactory)
    assert ref.factory is _factory
    assert ref.display_name == "_factory"

    with pytest.raises(LazyWireInvalidKeyError):
        module_ref(3)


def test_derive_module_id() -> None:
    anonymous = lambda: None  # noqa: E731

    assert derive_module_id(_factory) == "_factory"
    assert derive_module_id(anonymous).startswith("<lambda>@0x")
    assert derive_module_id(anonymous) != derive_module_id(lambda: None)


def test_resolver_find_cycles_ignores_unregistered_edges() -> None:
    registry = Registry()
    registry.add(Declaration(id="a", factory=lambda b, c: None, dependencies=("b", "c")))
    registry.add(Declaration(id="b", factory=lambda a: None, dependencies=("a",)))

    assert Resolver(registry).find_cycles() == [("a", "b")]


def test_resolver_tracks_running_factory() -> None:
    registry = Registry()
    resolver = Resolver(registry)
    seen: list[bool] = []
    registry.add(
        Declaration(id="x", factory=lambda: seen.append(resolver.is_running_factory)),
    )

    resolver.resolve(ByName("x"))

    assert seen == [True]
    assert resolver.is_running_factory is False
