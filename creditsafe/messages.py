"""Business messages the GlobalData service embeds in its responses.

Responses carry ``Message`` elements with a six digit ``Code`` attribute.
Some codes only inform (e.g. an empty search), the rest mean the request
failed even though the HTTP status was 200.
"""


from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ApiMessage:
    """One entry of the business message table."""

    code: str
    message: str
    error: bool = True

    @property
    def is_error(self) -> bool:
        return self.error


class MessageLookup(Protocol):
    """Anything that resolves a message code to an ApiMessage."""

    def for_code(self, code: str) -> ApiMessage: ...


CODE_LENGTH = 6
UNKNOWN_MESSAGE = "Unknown error"

# 01xxxx data and report availability, 02xxxx access, 03xxxx temporary
# conditions, 04xxxx request parameters, 05xxxx service internals
MESSAGES: tuple[ApiMessage, ...] = (
    ApiMessage("010101", "No results", error=False),
    ApiMessage("010102", "Too many results", error=True),
    ApiMessage("010103", "Report unavailable", error=True),
    ApiMessage("010104", "Report unavailable due to legal causes", error=True),
    ApiMessage("010105", "Report unavailable online", error=True),
    ApiMessage("010106", "Report unavailable at the moment, offline report requested", error=False),
    ApiMessage("010107", "Report type changed to the available one", error=False),
    ApiMessage("010108", "Company is inactive", error=False),
    ApiMessage("010109", "Data is partially available", error=False),
    ApiMessage("020101", "Access denied", error=True),
    ApiMessage("020102", "Privileges expired", error=True),
    ApiMessage("020103", "Access to the requested country is restricted", error=True),
    ApiMessage("020104", "Access to the requested report type is restricted", error=True),
    ApiMessage("020105", "Account locked", error=True),
    ApiMessage("020106", "Report limit exceeded", error=True),
    ApiMessage("030101", "Service temporarily unavailable", error=True),
    ApiMessage("030102", "Search timeout", error=True),
    ApiMessage("040101", "Invalid operation parameters", error=True),
    ApiMessage("040102", "Parameters are missing", error=True),
    ApiMessage("040103", "Invalid search criteria", error=True),
    ApiMessage("040104", "Unsupported country", error=True),
    ApiMessage("040105", "Unsupported language", error=True),
    ApiMessage("040106", "Unsupported report type", error=True),
    ApiMessage("040107", "Invalid company identifier", error=True),
    ApiMessage("050101", "Unknown internal error", error=True),
    ApiMessage("050102", "Internal error, try again later", error=True),
)

_BY_CODE: dict[str, ApiMessage] = {m.code: m for m in MESSAGES}


def pad_code(code: str | int) -> str:
    """Left-pad a message code with zeros to the six digit form."""
    return str(code).strip().rjust(CODE_LENGTH, "0")


def for_code(code: str | int) -> ApiMessage:
    """Resolve a message code; unknown codes are reported as errors."""
    padded = pad_code(code)
    message = _BY_CODE.get(padded)
    if message is None:
        return ApiMessage(padded, UNKNOWN_MESSAGE, error=True)
    return message
