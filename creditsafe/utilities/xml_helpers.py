"""lxml and xmltodict helpers for request envelopes and response documents.

Functions:
    build_envelope — namespaced request map to a SOAP 1.1 envelope.
    body_to_dict — reply body to nested dict with snake_case keys.
    collect_namespaces — every namespace URI the document declares, per prefix.
    find_elements — elements with a local name under a set of candidate prefixes.
"""


from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import xmltodict
from lxml import etree

from creditsafe.enums.namespaces import SOAP_ENV_URI, XSI_URI

# Prefix name that stands for the default (unprefixed) namespace
DEFAULT_PREFIX = "xmlns"

XSI_NIL = etree.QName(XSI_URI, "nil").text
XML_URI = "http://www.w3.org/XML/1998/namespace"

_WORD_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


# ---------------------------------------------------------------------------
# Key conversion
# ---------------------------------------------------------------------------

def snake_case(name: str) -> str:
    """FindCompaniesResult -> find_companies_result, CompanyID -> company_id."""
    return _WORD_BOUNDARY_RE.sub("_", name).replace("-", "_").lower()


def camelcase(name: str) -> str:
    """registration_number -> RegistrationNumber."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def lower_camelcase(name: str) -> str:
    """registration_number -> registrationNumber."""
    converted = camelcase(name)
    return converted[:1].lower() + converted[1:]


KEY_CONVERTERS: dict[str, Callable[[str], str] | None] = {
    "none": None,
    "camelcase": camelcase,
    "lower_camelcase": lower_camelcase,
    "snakecase": snake_case,
}


# ---------------------------------------------------------------------------
# Request envelope
# ---------------------------------------------------------------------------

def build_envelope(
    operation: str,
    message: Mapping[str, Any],
    namespaces: Mapping[str, str],
    env_namespace: str = "soapenv",
    namespace_identifier: str | None = None,
    key_converter: Callable[[str], str] | None = None,
) -> etree._Element:
    """Build a SOAP 1.1 envelope around ``message``.

    Keys of ``message`` are written as element names. A ``prefix:Local`` key
    is placed in the namespace bound to ``prefix`` in ``namespaces``; the
    prefix declarations of ``namespaces`` go onto the envelope so the wire
    text keeps the caller's prefixes. ``key_converter`` only touches the
    local part of a key.

    Raises:
        ValueError: If a key uses a prefix missing from ``namespaces``.
    """
    nsmap: dict[str, str] = {env_namespace: SOAP_ENV_URI, "xsi": XSI_URI}
    nsmap.update(namespaces)

    envelope = etree.Element(etree.QName(SOAP_ENV_URI, "Envelope"), nsmap=nsmap)
    etree.SubElement(envelope, etree.QName(SOAP_ENV_URI, "Header"))
    body = etree.SubElement(envelope, etree.QName(SOAP_ENV_URI, "Body"))

    operation_key = f"{namespace_identifier}:{operation}" if namespace_identifier else operation
    wrapper = etree.SubElement(body, _qualify(operation_key, namespaces))
    _append_children(wrapper, message, namespaces, key_converter)
    return envelope


def _qualify(
    key: str,
    namespaces: Mapping[str, str],
    key_converter: Callable[[str], str] | None = None,
) -> etree.QName | str:
    prefix, _, name = key.rpartition(":")
    if key_converter is not None:
        name = key_converter(name)
    if not prefix:
        return name
    uri = namespaces.get(prefix)
    if uri is None:
        raise ValueError(f"Unknown namespace prefix '{prefix}' in key '{key}'")
    return etree.QName(uri, name)


def _append_children(
    parent: etree._Element,
    message: Mapping[str, Any],
    namespaces: Mapping[str, str],
    key_converter: Callable[[str], str] | None,
) -> None:
    for key, value in message.items():
        tag = _qualify(key, namespaces, key_converter)
        items = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            child = etree.SubElement(parent, tag)
            if item is None:
                child.set(XSI_NIL, "true")
            elif isinstance(item, Mapping):
                _append_children(child, item, namespaces, key_converter)
            elif isinstance(item, bool):
                child.text = "true" if item else "false"
            else:
                child.text = str(item)


# ---------------------------------------------------------------------------
# Response documents
# ---------------------------------------------------------------------------

def _postprocess(path: Any, key: str, value: Any) -> tuple[str, Any] | None:
    """xmltodict hook: snake_case keys, drop xsi attributes, nil elements to None."""
    if key == "#text":
        return key, value
    if key.startswith("@"):
        name = key[1:]
        if name == "xsi:nil":
            return key, value
        if name.startswith("xsi:"):
            return None
        return f"@{snake_case(name)}", value
    if isinstance(value, dict):
        nil = value.pop("@xsi:nil", None)
        if nil == "true":
            value = None
        elif not value:
            value = None
    return snake_case(key), value


def body_to_dict(document: etree._Element) -> dict[str, Any]:
    """Convert the children of ``soapenv:Body`` into one dict.

    Leaves without attributes become their stripped text (None when empty or
    ``xsi:nil``). Other elements become dicts: attributes under ``@name``
    keys, children under snake_case keys (repeated siblings as a list) and
    remaining text under ``#text``.
    """
    body = document.find(f"{{{SOAP_ENV_URI}}}Body")
    if body is None:
        return {}

    # Every element namespace collapses to its local name; xsi keeps a prefix
    # so nil markers stay recognizable
    namespaces: dict[str, str | None] = {
        uri: None for uris in collect_namespaces(body).values() for uri in uris
    }
    namespaces[XSI_URI] = "xsi"
    namespaces[XML_URI] = None

    parsed = xmltodict.parse(
        etree.tostring(body, with_tail=False),
        process_namespaces=True,
        namespaces=namespaces,
        postprocessor=_postprocess,
    )
    return next(iter(parsed.values()), None) or {}


def collect_namespaces(document: etree._Element) -> dict[str, list[str]]:
    """Return every URI declared in ``document`` per prefix, in document order.

    The default namespace is reported under ``DEFAULT_PREFIX``.
    """
    found: dict[str, list[str]] = {}
    for element in document.iter(etree.Element):
        for prefix, uri in element.nsmap.items():
            uris = found.setdefault(prefix or DEFAULT_PREFIX, [])
            if uri not in uris:
                uris.append(uri)
    return found


def find_elements(
    document: etree._Element, name: str, prefixes: Iterable[str]
) -> list[etree._Element]:
    """Collect elements named ``name`` under any of ``prefixes``.

    Matches are grouped by prefix in the order given, each group in document
    order. A URI bound to several of the prefixes is searched once.
    """
    namespaces = collect_namespaces(document)
    matches: list[etree._Element] = []
    seen: set[str] = set()
    for prefix in prefixes:
        for uri in namespaces.get(prefix, ()):
            if uri in seen:
                continue
            seen.add(uri)
            matches.extend(document.iter(f"{{{uri}}}{name}"))
    return matches
