"""Tests for attaching declared dependencies to factories."""

from typing import Any

import pytest

from lazywire import DEPENDENCY_ATTRIBUTE, Container, dependency, depends_on
from lazywire.dependencies import declared_dependencies
from lazywire.exceptions import LazyWireInvalidRegistrationError
from tests.conftest import CountingFactory


def test_dependency_accumulates_in_call_order(container: Container) -> None:
    def Bar() -> str:  # noqa: N802
        return "bar"

    def Baz() -> str:  # noqa: N802
        return "baz"

    def Foo(bar: str, baz: str) -> list[str]:  # noqa: N802
        return [bar, baz]

    dependency(Foo, [Bar])
    dependency(Foo, [Baz])
    container.register(Baz)
    container.register(Bar)
    container.register(Foo)
    container.validate()

    assert declared_dependencies(Foo) == [Bar, Baz]
    assert container.get(Foo) == ["bar", "baz"]


def test_dependency_accepts_a_single_id() -> None:
    def service(db: object) -> object:
        return db

    dependency(service, "db")
    dependency(service, "cache")

    assert getattr(service, DEPENDENCY_ATTRIBUTE) == ["db", "cache"]


def test_dependency_accepts_a_single_factory() -> None:
    def db() -> None:
        return None

    def service(value: object) -> object:
        return value

    dependency(service, db)

    assert declared_dependencies(service) == [db]


def test_dependency_returns_the_factory() -> None:
    def service() -> None:
        return None

    assert dependency(service, ["a"]) is service


def test_depends_on_decorator(container: Container) -> None:
    @depends_on("host", "port")
    def address(host: str, port: int) -> str:
        return f"{host}:{port}"

    container.register("host", lambda: "localhost")
    container.register("port", lambda: 8080)
    container.register(address)

    assert container.get("address") == "localhost:8080"


def test_undecorated_factory_has_no_dependencies() -> None:
    def plain() -> None:
        return None

    assert declared_dependencies(plain) == []


def test_registration_snapshots_attached_dependencies(container: Container) -> None:
    def service(db: str) -> str:
        return db

    dependency(service, "db")
    container.register(service)
    dependency(service, "late")
    container.register("db", lambda: "db")

    assert container.get("service") == "db"


@pytest.mark.parametrize(
    "factory",
    [
        pytest.param(len, id="builtin"),
        pytest.param(CountingFactory().__call__, id="bound-method"),
    ],
)
def test_dependency_rejects_factories_without_attributes(factory: Any) -> None:
    with pytest.raises(LazyWireInvalidRegistrationError, match="Cannot attach dependencies"):
        dependency(factory, "db")
