"""
Custom exceptions for the Pandorabots client

Construction-time errors derive from ConfigurationException, request-time
errors from APIException. Nothing is retried internally; every error reaches
the caller.
"""
from typing import Optional


class PandorabotsException(Exception):
    """Base exception for all client errors."""
    pass


class ConfigurationException(PandorabotsException):
    """Exception for invalid client configuration."""
    pass


class MissingCredentials(ConfigurationException):
    """Raised when the application ID or the user key is empty."""

    def __init__(self, message: str = "Missing application ID or user key"):
        super().__init__(message)


class InvalidURL(ConfigurationException):
    """Raised when the base URL does not parse or is not http/https."""

    def __init__(self, url: str, message: Optional[str] = None):
        self.url = url
        super().__init__(message or f"Invalid schema specified [{url}]")


class UnsupportedFileExtension(PandorabotsException):
    """Raised when a file name has no known personality-file kind."""

    def __init__(self, filename: str, extension: str):
        self.filename = filename
        self.extension = extension
        super().__init__(f"Extension is not recognized [{extension}]")


class APIException(PandorabotsException):
    """Exception for errors while talking to the service."""
    pass


class TransportFailure(APIException):
    """The HTTP exchange itself could not complete."""
    pass


class UnexpectedStatus(APIException):
    """The service answered with a non-2xx status code."""

    def __init__(self, status: int, reason: str):
        self.status = status
        self.reason = reason
        super().__init__(f"Unexpected status code: {status} ({reason})")


class DecodeError(APIException):
    """The response body did not match the expected structure."""
    pass
