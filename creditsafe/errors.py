"""Error taxonomy and reclassification of transport failures.

Classes:
    CreditsafeError — base class for every error raised by this package.
    InvalidEnvironmentError — unknown environment passed to the client.
    ApiError — the service rejected the request or reported a business failure.
    HttpError — the network layer failed before a service response was obtained.
    ErrorRule — one (predicate, transform) pair of the reclassification chain.
"""


from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import requests
from zeep.exceptions import Fault, TransportError

UNAUTHORIZED_MESSAGE = "Unauthorized: invalid credentials"


class CreditsafeError(Exception):
    """Base error for creditsafe."""


class InvalidEnvironmentError(CreditsafeError, ValueError):
    """Raised when a client is constructed for an unknown environment."""

    def __init__(self, environment: object) -> None:
        super().__init__(f"Invalid environment '{environment}'")
        self.environment = environment


class ApiError(CreditsafeError):
    """Raised when the service rejects a request.

    Args:
        message: Human readable reason, as reported by the service.
        code: Business message code when the error came from an embedded message.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class HttpError(CreditsafeError):
    """Raised when the HTTP request itself failed (DNS, connect, TLS, timeout)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------------------------
# Reclassification rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorRule:
    """Maps exceptions accepted by ``matches`` to the exception built by ``transform``."""

    name: str
    matches: Callable[[BaseException], bool]
    transform: Callable[[BaseException], Exception]


def _is_fault(error: BaseException) -> bool:
    return isinstance(error, Fault)


def _is_unauthorized(error: BaseException) -> bool:
    return isinstance(error, TransportError) and error.status_code == 401


def _is_transport_error(error: BaseException) -> bool:
    return isinstance(error, TransportError)


def _is_connection_error(error: BaseException) -> bool:
    return isinstance(error, requests.RequestException)


def _message_of(error: BaseException) -> str:
    return str(getattr(error, "message", None) or error)


DEFAULT_RULES: tuple[ErrorRule, ...] = (
    ErrorRule("soap_fault", _is_fault, lambda e: ApiError(_message_of(e))),
    ErrorRule("unauthorized", _is_unauthorized, lambda _: ApiError(UNAUTHORIZED_MESSAGE)),
    ErrorRule("http_status", _is_transport_error, lambda e: ApiError(_message_of(e))),
    ErrorRule(
        "connection",
        _is_connection_error,
        lambda e: HttpError(f"Error making HTTP request: {e}"),
    ),
)


def reclassify(error: BaseException, rules: Sequence[ErrorRule] = DEFAULT_RULES) -> Exception | None:
    """Return the replacement for ``error`` from the first matching rule, or None."""
    for rule in rules:
        if rule.matches(error):
            return rule.transform(error)
    return None
