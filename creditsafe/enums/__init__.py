"""Public enum exports used across the client."""

from creditsafe.enums.environment import Environment
from creditsafe.enums.namespaces import NAMESPACE_URIS, Namespace
from creditsafe.enums.operations import Operation

__all__ = [
    "Environment",
    "Namespace",
    "NAMESPACE_URIS",
    "Operation",
]
