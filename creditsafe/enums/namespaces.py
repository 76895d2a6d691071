"""XML namespaces used by GlobalData request payloads."""

from enum import StrEnum


class Namespace(StrEnum):
    """Namespace prefixes bound into every request envelope."""

    OPER = "oper"
    DAT = "dat"
    CRED = "cred"

    @property
    def uri(self) -> str:
        return NAMESPACE_URIS[self]

    def qualify(self, local_name: str) -> str:
        """Return ``prefix:local_name`` for use as a request key."""
        return f"{self.value}:{local_name}"


NAMESPACE_URIS: dict[Namespace, str] = {
    Namespace.OPER: "http://www.creditsafe.com/globaldata/operations",
    Namespace.DAT: "http://www.creditsafe.com/globaldata/datatypes",
    Namespace.CRED: "http://schemas.datacontract.org/2004/07/Creditsafe.GlobalData",
}

SOAP_ENV_URI = "http://schemas.xmlsoap.org/soap/envelope/"
XSI_URI = "http://www.w3.org/2001/XMLSchema-instance"
