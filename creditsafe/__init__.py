"""Client for the Creditsafe GlobalData SOAP service."""

from creditsafe.client import Client, Credentials
from creditsafe.enums import Environment
from creditsafe.errors import ApiError, CreditsafeError, HttpError, InvalidEnvironmentError
from creditsafe.messages import ApiMessage

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "ApiMessage",
    "Client",
    "CreditsafeError",
    "Credentials",
    "Environment",
    "HttpError",
    "InvalidEnvironmentError",
]
