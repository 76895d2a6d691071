import os

import pytest

# Default values allow building settings-driven clients in unit contexts.
# No test talks to the real service.
TEST_ENV_DEFAULTS = {
    "CS_ENVIRONMENT": "test",
    "CS_USERNAME": "test-user",
    "CS_PASSWORD": "test-password",
}

for env_key, env_value in TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(env_key, env_value)


FIND_COMPANIES_RESPONSE = """<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">
  <s:Body>
    <FindCompaniesResponse xmlns="http://www.creditsafe.com/globaldata/operations">
      <FindCompaniesResult xmlns:a="http://www.creditsafe.com/globaldata/datatypes"
                           xmlns:i="http://www.w3.org/2001/XMLSchema-instance">
        {messages}
        <a:Companies>
          <a:Company>
            <a:Id>GB001-0-12345678</a:Id>
            <a:Name>ACME LIMITED</a:Name>
            <a:RegistrationNumber>12345678</a:RegistrationNumber>
          </a:Company>
        </a:Companies>
      </FindCompaniesResult>
    </FindCompaniesResponse>
  </s:Body>
</s:Envelope>
"""

COMPANY_REPORT_RESPONSE = """<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">
  <s:Body>
    <RetrieveCompanyOnlineReportResponse xmlns="http://www.creditsafe.com/globaldata/operations">
      <RetrieveCompanyOnlineReportResult xmlns:a="http://www.creditsafe.com/globaldata/datatypes">
        <a:Reports>
          <a:Report CompanyId="GB001-0-12345678" Language="EN" ReportCurrency="GBP">
            <a:CompanySummary>
              <a:BusinessName>ACME LIMITED</a:BusinessName>
              <a:Country>GB</a:Country>
            </a:CompanySummary>
          </a:Report>
        </a:Reports>
      </RetrieveCompanyOnlineReportResult>
    </RetrieveCompanyOnlineReportResponse>
  </s:Body>
</s:Envelope>
"""

FAULT_RESPONSE = """<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">
  <s:Body>
    <s:Fault>
      <faultcode>s:Client</faultcode>
      <faultstring xml:lang="en-GB">Invalid request parameters</faultstring>
    </s:Fault>
  </s:Body>
</s:Envelope>
"""

DEFAULT_NS_MESSAGE = (
    '<Messages xmlns="http://www.creditsafe.com/globaldata/datatypes">'
    '<Message Type="{type}" Code="{code}">{text}</Message>'
    "</Messages>"
)

Q1_MESSAGE = (
    '<q1:Messages xmlns:q1="http://www.creditsafe.com/globaldata/datatypes">'
    '<q1:Message Type="{type}" Code="{code}">{text}</q1:Message>'
    "</q1:Messages>"
)


@pytest.fixture
def find_companies_xml():
    """Build a FindCompanies reply with the given embedded Messages markup."""

    def build(messages: str = "") -> str:
        return FIND_COMPANIES_RESPONSE.format(messages=messages)

    return build


@pytest.fixture
def company_report_xml() -> str:
    return COMPANY_REPORT_RESPONSE


@pytest.fixture
def fault_xml() -> str:
    return FAULT_RESPONSE


@pytest.fixture
def default_ns_message():
    """Messages markup in the default namespace."""

    def build(code: str, text: str = "", type: str = "Error") -> str:
        return DEFAULT_NS_MESSAGE.format(code=code, text=text, type=type)

    return build


@pytest.fixture
def q1_message():
    """Messages markup under the q1 prefix."""

    def build(code: str, text: str = "", type: str = "Error") -> str:
        return Q1_MESSAGE.format(code=code, text=text, type=type)

    return build


@pytest.fixture
def credentials() -> dict[str, str]:
    return {"username": "user", "password": "secret"}
