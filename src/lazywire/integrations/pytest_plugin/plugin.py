from __future__ import annotations

from collections.abc import Iterator

import pytest

from lazywire.container import Accessor, Container

VALIDATE_MARKER = "lazywire_validate"


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``lazywire_validate`` marker."""
    config.addinivalue_line(
        "markers",
        f"{VALIDATE_MARKER}: validate the lazywire_container fixture after the test body runs.",
    )


@pytest.fixture()
def lazywire_container(request: pytest.FixtureRequest) -> Iterator[Container]:
    """Create a per-test container named after the test.

    The fixture is function-scoped, so registrations are isolated between
    tests unless users override the fixture. Tests marked with
    ``@pytest.mark.lazywire_validate`` get the container validated after the
    test body, so a broken graph fails the test during teardown.

    Yields:
        A new ``Container`` instance.

    """
    container = Container(request.node.name)
    yield container
    if request.node.get_closest_marker(VALIDATE_MARKER) is not None:
        container.validate()


@pytest.fixture()
def lazywire_accessor(lazywire_container: Container) -> Accessor:
    """Read-only accessor bound to ``lazywire_container``."""
    return lazywire_container.accessor()
