"""Creditsafe GlobalData client.

Builds namespaced request maps for the two supported operations, sends them
through a lazily created SoapTransport and turns every failure, including
error-coded ``Message`` elements inside HTTP 200 replies, into ApiError or
HttpError.
"""


from __future__ import annotations

import base64
import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from creditsafe import messages as default_messages
from creditsafe.enums import NAMESPACE_URIS, Environment, Namespace, Operation
from creditsafe.errors import DEFAULT_RULES, ApiError, ErrorRule, InvalidEnvironmentError, reclassify
from creditsafe.messages import MessageLookup
from creditsafe.settings.main import CreditsafeSettings
from creditsafe.utilities.soap import SoapResponse, SoapTransport

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"

# The service emits Message elements under either prefix depending on deployment
DEFAULT_MESSAGE_PREFIXES: tuple[str, ...] = ("q1", "xmlns")

FIND_COMPANY_PATH = ("find_companies_response", "find_companies_result", "companies", "company")
COMPANY_REPORT_PATH = (
    "retrieve_company_online_report_response",
    "retrieve_company_online_report_result",
    "reports",
    "report",
)


@dataclass(frozen=True)
class Credentials:
    """Basic-Auth credential pair."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"

    @classmethod
    def coerce(cls, value: Credentials | Mapping[str, str]) -> Credentials:
        if isinstance(value, Credentials):
            return value
        return cls(username=value["username"], password=value["password"])

    def auth_header(self) -> dict[str, str]:
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}


def wsdl_path(environment: Environment | str) -> Path:
    """Location of the packaged WSDL for ``environment``."""
    return DATA_DIR / f"creditsafe-{environment}.xml"


# ---------------------------------------------------------------------------
# Request builders
# ---------------------------------------------------------------------------

def build_find_company_request(country_code: str | None, registration_number: str | None) -> dict[str, Any]:
    """Request map for FindCompanies; values are passed through unvalidated."""
    return {
        Namespace.OPER.qualify("countries"): {
            Namespace.CRED.qualify("CountryCode"): country_code,
        },
        Namespace.OPER.qualify("searchCriteria"): {
            Namespace.DAT.qualify("RegistrationNumber"): registration_number,
        },
    }


def build_company_report_request(company_id: str | int, language: str = "EN") -> dict[str, Any]:
    """Request map for RetrieveCompanyOnlineReport of a full report."""
    return {
        Namespace.OPER.qualify("companyId"): f"{company_id}",
        Namespace.OPER.qualify("reportType"): "Full",
        Namespace.OPER.qualify("language"): language,
    }


def dig(mapping: Mapping[str, Any], path: Sequence[str]) -> Any:
    """Descend ``path`` through nested mappings; a missing key raises KeyError."""
    value: Any = mapping
    for key in path:
        value = value[key]
    return value


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class Client:
    """Client for one Creditsafe environment and one credential pair.

    Args:
        environment: ``"test"`` or ``"live"``.
        credentials: Credentials or a mapping with ``username`` and ``password``.
        transport_overrides: Options merged over the transport defaults (overrides win).
        message_prefixes: Namespace prefixes searched for embedded ``Message`` elements.
        messages: Business message lookup consulted for every embedded message.
        error_rules: Ordered reclassification rules for failed calls.
        transport_factory: Callable building the transport handle from the merged options.

    Raises:
        InvalidEnvironmentError: If ``environment`` is not a known environment.

    Example:
        >>> client = Client("test", {"username": "user", "password": "secret"})
        >>> companies = client.find_company(country_code="GB", registration_number="12345678")
    """

    def __init__(
        self,
        environment: Environment | str,
        credentials: Credentials | Mapping[str, str],
        transport_overrides: Mapping[str, Any] | None = None,
        *,
        message_prefixes: Sequence[str] = DEFAULT_MESSAGE_PREFIXES,
        messages: MessageLookup = default_messages,
        error_rules: Sequence[ErrorRule] = DEFAULT_RULES,
        transport_factory: Callable[..., Any] = SoapTransport,
    ) -> None:
        if not isinstance(environment, str) or not Environment.has_value(environment):
            raise InvalidEnvironmentError(environment)

        self.environment = Environment(environment)
        self.credentials = Credentials.coerce(credentials)
        self.transport_overrides: dict[str, Any] = dict(transport_overrides or {})
        self.message_prefixes = tuple(message_prefixes)
        self.messages = messages
        self.error_rules = tuple(error_rules)

        self._transport_factory = transport_factory
        self._transport: Any = None
        self._transport_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: CreditsafeSettings | None = None, **kwargs: Any) -> Client:
        """Build a client from CreditsafeSettings (environment variables or ``.env``).

        Raises:
            ValueError: If username or password is not configured.
        """
        settings = settings or CreditsafeSettings()
        if not settings.username or settings.password is None:
            raise ValueError("Creditsafe username and password must be configured (CS_USERNAME, CS_PASSWORD)")

        overrides: dict[str, Any] = {"timeout": settings.timeout}
        if settings.operation_timeout is not None:
            overrides["operation_timeout"] = settings.operation_timeout
        overrides.update(kwargs.pop("transport_overrides", None) or {})

        credentials = Credentials(settings.username, settings.password.get_secret_value())
        return cls(settings.environment, credentials, overrides, **kwargs)

    def __repr__(self) -> str:
        return f"Client(environment={self.environment.value!r}, credentials={self.credentials!r})"

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Public operations ---

    def find_company(self, country_code: str | None = None, registration_number: str | None = None) -> Any:
        """Search companies by country and registration number.

        Returns:
            The ``company`` fragment of the reply (a dict, or a list of dicts).

        Raises:
            ApiError: The service rejected the request.
            HttpError: The HTTP request failed.
            KeyError: The reply did not have the expected shape.
        """
        message = build_find_company_request(country_code, registration_number)
        body = self._call(Operation.FIND_COMPANIES, message)
        return dig(body, FIND_COMPANY_PATH)

    def company_report(self, company_id: str | int, language: str = "EN") -> Any:
        """Retrieve the full online report of a company.

        Returns:
            The ``report`` fragment of the reply.

        Raises:
            ApiError: The service rejected the request.
            HttpError: The HTTP request failed.
            KeyError: The reply did not have the expected shape.
        """
        message = build_company_report_request(company_id, language)
        body = self._call(Operation.RETRIEVE_COMPANY_ONLINE_REPORT, message)
        return dig(body, COMPANY_REPORT_PATH)

    # --- Transport handle ---

    @property
    def transport(self) -> Any:
        """Transport handle, built on first access and reused afterwards."""
        if self._transport is None:
            with self._transport_lock:
                if self._transport is None:
                    self._transport = self._build_transport()
        return self._transport

    def transport_options(self) -> dict[str, Any]:
        """Default transport options with the caller's overrides merged on top."""
        options: dict[str, Any] = {
            "wsdl": wsdl_path(self.environment),
            "env_namespace": "soapenv",
            "namespace_identifier": Namespace.OPER.value,
            "namespaces": {ns.value: uri for ns, uri in NAMESPACE_URIS.items()},
            "headers": self.credentials.auth_header(),
            "convert_request_keys_to": "none",
        }
        options.update(self.transport_overrides)
        return options

    def _build_transport(self) -> Any:
        logger.debug("Building %s transport", self.environment.value)
        return self._transport_factory(**self.transport_options())

    def close(self) -> None:
        """Release the transport handle; a later call builds a new one."""
        with self._transport_lock:
            transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()

    # --- Error normalization ---

    def _call(self, operation: Operation, message: dict[str, Any]) -> dict[str, Any]:
        """Perform one remote call and return the reply body.

        Embedded error messages raise ApiError; failures raised by the call
        are reclassified by ``error_rules``, unmatched ones propagate as is.
        """
        try:
            response = self.transport.call(operation.value, message)
        except Exception as exc:
            replacement = reclassify(exc, self.error_rules)
            if replacement is None:
                raise
            logger.warning("%s failed: %s", operation.value, replacement)
            raise replacement from exc

        self._handle_api_messages(response)
        return response.body

    def _handle_api_messages(self, response: SoapResponse) -> None:
        for element in response.find_elements("Message", self.message_prefixes):
            code = element.get("Code")
            if code is None:
                continue
            api_message = self.messages.for_code(code)
            if api_message.is_error:
                logger.warning("Service reported error %s: %s", api_message.code, api_message.message)
                raise ApiError(api_message.message, code=api_message.code)
            logger.debug("Service message %s: %s", api_message.code, api_message.message)
