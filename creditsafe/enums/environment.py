"""Service environments."""

from enum import StrEnum


class Environment(StrEnum):
    """Creditsafe deployments, each with its own WSDL and endpoint."""

    TEST = "test"
    LIVE = "live"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Return True when the provided value names a known environment."""
        return value in cls._value2member_map_
