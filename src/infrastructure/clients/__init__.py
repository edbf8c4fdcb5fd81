"""External API client implementations."""

from .directory_client import HttpClientDirectory, HttpEstablishmentDirectory

__all__ = [
    "HttpClientDirectory",
    "HttpEstablishmentDirectory",
]
