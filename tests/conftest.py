"""Shared pytest fixtures for lazywire tests."""

from typing import Any

import pytest

from lazywire.container import Container


@pytest.fixture()
def container(request: pytest.FixtureRequest) -> Container:
    """Container named after the running test."""
    return Container(request.node.name)


@pytest.fixture()
def unnamed_container() -> Container:
    return Container()


class CountingFactory:
    """Factory that records how many times and with what it was called."""

    def __init__(self, result: Any = None) -> None:
        self.result = result
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.result
