"""zeep-backed SOAP transport with verbatim request keys.

Classes:
    SoapResponse — parsed reply envelope, queryable as XML and as a nested dict.
    SoapTransport — WSDL-configured connection that posts namespaced request maps.
"""


from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import cached_property
from pathlib import Path
from typing import Any

import requests
import zeep
from lxml import etree
from zeep.exceptions import Fault, TransportError, XMLSyntaxError
from zeep.loader import parse_xml
from zeep.transports import Transport

from creditsafe.enums.namespaces import SOAP_ENV_URI
from creditsafe.utilities.xml_helpers import KEY_CONVERTERS, body_to_dict, build_envelope, find_elements

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/xml; charset=utf-8"

_ENV_NS = {"soapenv": SOAP_ENV_URI}


# ---------------------------------------------------------------------------
# SoapResponse
# ---------------------------------------------------------------------------

class SoapResponse:
    """A successfully received reply envelope."""

    def __init__(
        self,
        document: etree._Element,
        status_code: int = 200,
        http_headers: Mapping[str, str] | None = None,
    ) -> None:
        self.document = document
        self.status_code = status_code
        self.http_headers = dict(http_headers or {})

    @classmethod
    def from_string(cls, content: str | bytes, status_code: int = 200) -> SoapResponse:
        """Build a response from raw envelope text."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        return cls(etree.fromstring(content), status_code=status_code)

    @cached_property
    def body(self) -> dict[str, Any]:
        """Contents of ``soapenv:Body`` as a nested dict with snake_case keys."""
        return body_to_dict(self.document)

    def find_elements(self, name: str, prefixes: Iterable[str]) -> list[etree._Element]:
        """Elements named ``name`` under any of the document's ``prefixes``."""
        return find_elements(self.document, name, prefixes)


# ---------------------------------------------------------------------------
# SoapTransport
# ---------------------------------------------------------------------------

class SoapTransport:
    """Connection to one SOAP service described by a WSDL.

    Request maps are written to the wire as given (``prefix:Local`` keys keep
    their prefixes); the WSDL only supplies the endpoint address and the
    SOAPAction of each operation.

    Args:
        wsdl: Path or URL of the WSDL document.
        namespaces: Prefix to URI bindings declared on every envelope.
        env_namespace: Prefix of the SOAP envelope namespace.
        namespace_identifier: Prefix of the operation wrapper element.
        headers: HTTP headers sent with every request (e.g. Authorization).
        convert_request_keys_to: One of ``KEY_CONVERTERS``; ``"none"`` keeps keys verbatim.
        timeout: Seconds allowed for loading the WSDL.
        operation_timeout: Seconds allowed for each service call (None waits forever).
        endpoint: Address overriding the one declared in the WSDL.
        session: requests.Session to use; a new one is created when omitted.
        verify: TLS verification flag or CA bundle path.
        proxies: requests-style proxy mapping.
        service_name: WSDL service to bind; the first one when omitted.
        port_name: WSDL port to bind; the first one when omitted.
        settings: zeep.Settings for XML parsing.
    """

    def __init__(
        self,
        wsdl: str | Path,
        namespaces: Mapping[str, str],
        env_namespace: str = "soapenv",
        namespace_identifier: str | None = None,
        headers: Mapping[str, str] | None = None,
        convert_request_keys_to: str = "none",
        timeout: int = 300,
        operation_timeout: int | None = None,
        endpoint: str | None = None,
        session: requests.Session | None = None,
        verify: bool | str = True,
        proxies: Mapping[str, str] | None = None,
        service_name: str | None = None,
        port_name: str | None = None,
        settings: zeep.Settings | None = None,
    ) -> None:
        if convert_request_keys_to not in KEY_CONVERTERS:
            raise ValueError(
                f"Invalid convert_request_keys_to '{convert_request_keys_to}', "
                f"expected one of {sorted(KEY_CONVERTERS)}"
            )
        self.namespaces = dict(namespaces)
        self.env_namespace = env_namespace
        self.namespace_identifier = namespace_identifier
        self._key_converter = KEY_CONVERTERS[convert_request_keys_to]

        self.session = session or requests.Session()
        self.session.headers.update(headers or {})
        self.session.verify = verify
        if proxies:
            self.session.proxies.update(proxies)

        self.transport = Transport(session=self.session, timeout=timeout, operation_timeout=operation_timeout)
        self.client = zeep.Client(str(wsdl), transport=self.transport, settings=settings)
        self._port = self._resolve_port(service_name, port_name)
        self.address: str = endpoint or self._port.binding_options["address"]
        logger.debug("SOAP transport bound to %s (wsdl %s)", self.address, wsdl)

    def _resolve_port(self, service_name: str | None, port_name: str | None) -> Any:
        services = self.client.wsdl.services
        if not services:
            raise ValueError("WSDL declares no services")
        service = services[service_name] if service_name else next(iter(services.values()))
        return service.ports[port_name] if port_name else next(iter(service.ports.values()))

    @property
    def operations(self) -> list[str]:
        """Operation names offered by the bound port."""
        return list(self._port.binding._operations)

    def soap_action(self, operation: str) -> str:
        """SOAPAction of ``operation``; raises ValueError for unknown operations."""
        return self._port.binding.get(operation).soapaction or ""

    def build_envelope(self, operation: str, message: Mapping[str, Any]) -> etree._Element:
        return build_envelope(
            operation,
            message,
            namespaces=self.namespaces,
            env_namespace=self.env_namespace,
            namespace_identifier=self.namespace_identifier,
            key_converter=self._key_converter,
        )

    def call(self, operation: str, message: Mapping[str, Any]) -> SoapResponse:
        """Post ``message`` as ``operation`` and return the parsed reply.

        Raises:
            zeep.exceptions.Fault: The reply carried a SOAP fault.
            zeep.exceptions.TransportError: Non-2xx reply or unparseable XML.
            requests.RequestException: The HTTP request could not be completed.
        """
        operation = str(operation)
        headers = {
            "SOAPAction": f'"{self.soap_action(operation)}"',
            "Content-Type": CONTENT_TYPE,
        }
        envelope = self.build_envelope(operation, message)
        logger.debug("Calling %s at %s", operation, self.address)
        response = self.transport.post_xml(self.address, envelope, headers)
        return self.process_reply(response)

    def process_reply(self, response: requests.Response) -> SoapResponse:
        """Turn an HTTP reply into a SoapResponse or the matching zeep error."""
        status = response.status_code
        content = response.content
        success = 200 <= status < 300

        if not success and not content:
            raise TransportError(
                f"Server returned HTTP status {status} (no content available)",
                status_code=status,
            )

        try:
            document = parse_xml(content, self.transport, settings=self.client.settings)
        except (XMLSyntaxError, etree.XMLSyntaxError) as exc:
            raise TransportError(
                f"Server returned response ({status}) with invalid XML: {exc}.\nContent: {content!r}",
                status_code=status,
                content=content,
            ) from exc

        fault = document.find("soapenv:Body/soapenv:Fault", namespaces=_ENV_NS)
        if fault is not None:
            raise Fault(
                message=fault.findtext("faultstring", default=""),
                code=fault.findtext("faultcode"),
                actor=fault.findtext("faultactor"),
                detail=fault.find("detail"),
            )

        if not success:
            raise TransportError(
                f"Server returned HTTP status {status}",
                status_code=status,
                content=content,
            )

        return SoapResponse(document, status_code=status, http_headers=response.headers)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
