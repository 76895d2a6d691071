"""Remote operations exposed by the GlobalData service."""

from enum import StrEnum


class Operation(StrEnum):
    """Operation names as declared in the service WSDL."""

    FIND_COMPANIES = "FindCompanies"
    RETRIEVE_COMPANY_ONLINE_REPORT = "RetrieveCompanyOnlineReport"
