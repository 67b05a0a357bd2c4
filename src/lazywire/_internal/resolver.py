from __future__ import annotations

import logging
from typing import Any

from lazywire._internal.references import ByName, ModuleRef, module_ref
from lazywire._internal.registry import Declaration, Registry
from lazywire.exceptions import (
    LazyWireCyclicDependencyError,
    LazyWireError,
    LazyWireMissingDependencyError,
    LazyWireValidationError,
)

logger = logging.getLogger(__name__)


class Resolver:
    """Resolve modules from a registry lazily and validate its graph.

    The resolver does not own the registry; the container hands its registry
    in by reference and keeps registering into it.

    Resolution is depth first and memoized on the declarations themselves.
    It has no cycle guard: a circular chain recurses until ``RecursionError``.
    ``validate`` detects such chains without calling any factory.
    """

    def __init__(self, registry: Registry, container_name: str | None = None) -> None:
        self._registry = registry
        self._container_name = container_name
        self._running_factories = 0

    @property
    def is_running_factory(self) -> bool:
        """True while a factory of this resolver is executing."""
        return self._running_factories > 0

    def resolve(self, ref: ModuleRef, parent: str | None = None) -> Any:
        """Return the value of a module, running factories on first use.

        Args:
            ref: Module to resolve.
            parent: Id of the module that declared ``ref``, for error messages.

        Raises:
            LazyWireMissingDependencyError: If ``ref`` or any key in its
                dependency chain is not registered.

        """
        declaration = self._find(ref, parent)
        if declaration.resolved:
            return declaration.value

        args = [self.resolve(module_ref(key), declaration.id) for key in declaration.dependencies]

        logger.debug("Invoking factory for module %r", declaration.id)
        self._running_factories += 1
        try:
            value = declaration.factory(*args)
        finally:
            self._running_factories -= 1
        return declaration.store(value)

    def validate(self) -> bool:
        """Check the whole graph for cycles, then for missing dependencies.

        Missing dependencies are only looked for when no cycle was found.

        Raises:
            LazyWireValidationError: If any problem was found.

        """
        errors: list[LazyWireError] = [
            LazyWireCyclicDependencyError(path, self._container_name) for path in self.find_cycles()
        ]
        if not errors:
            errors = self.find_missing()

        if errors:
            raise LazyWireValidationError(errors)

        logger.debug("Validated %d modules", len(self._registry))
        return True

    def find_cycles(self) -> list[tuple[str, ...]]:
        """Return every cycle met by a DFS over ids in registration order.

        Each cycle is the slice of the DFS path that starts at the revisited
        id. Dependency keys that are not registered are ignored here.
        """
        cycles: list[tuple[str, ...]] = []
        finished: set[str] = set()
        path: list[str] = []
        on_path: set[str] = set()

        def visit(module_id: str) -> None:
            path.append(module_id)
            on_path.add(module_id)
            for key in self._registry.get_by_id(module_id).dependencies:
                dependency_id = self._registry.id_of(key)
                if dependency_id is None or dependency_id in finished:
                    continue
                if dependency_id in on_path:
                    cycles.append(tuple(path[path.index(dependency_id) :]))
                    continue
                visit(dependency_id)
            path.pop()
            on_path.discard(module_id)
            finished.add(module_id)

        for module_id in self._registry.ids():
            if module_id not in finished:
                visit(module_id)
        return cycles

    def find_missing(self) -> list[LazyWireError]:
        """Walk each registered module's chain and collect the first gap of each.

        Must only run on an acyclic graph.
        """
        errors: list[LazyWireError] = []
        checked: set[str] = set()
        for module_id in self._registry.ids():
            try:
                self._check(ByName(module_id), None, checked)
            except LazyWireMissingDependencyError as error:
                errors.append(error)
        return errors

    def _check(self, ref: ModuleRef, parent: str | None, checked: set[str]) -> None:
        declaration = self._find(ref, parent)
        if declaration.resolved or declaration.id in checked:
            return
        for key in declaration.dependencies:
            self._check(module_ref(key), declaration.id, checked)
        checked.add(declaration.id)

    def _find(self, ref: ModuleRef, parent: str | None) -> Declaration:
        declaration = self._registry.find(ref)
        if declaration is None:
            raise LazyWireMissingDependencyError(
                ref.display_name,
                parent=parent,
                container_name=self._container_name,
            )
        return declaration
