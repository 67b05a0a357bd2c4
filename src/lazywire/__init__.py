from lazywire.container import Accessor, Container
from lazywire.dependencies import DEPENDENCY_ATTRIBUTE, dependency, depends_on
from lazywire.exceptions import (
    LazyWireCyclicDependencyError,
    LazyWireError,
    LazyWireInvalidKeyError,
    LazyWireInvalidRegistrationError,
    LazyWireMissingDependencyError,
    LazyWireValidationError,
)

__all__ = [
    "DEPENDENCY_ATTRIBUTE",
    "Accessor",
    "Container",
    "LazyWireCyclicDependencyError",
    "LazyWireError",
    "LazyWireInvalidKeyError",
    "LazyWireInvalidRegistrationError",
    "LazyWireMissingDependencyError",
    "LazyWireValidationError",
    "dependency",
    "depends_on",
]
