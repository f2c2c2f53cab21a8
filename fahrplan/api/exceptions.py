"""
Exceptions raised by the Fahrplan API client.
"""

from typing import Optional


class APIException(Exception):
    """Base exception for API-related errors."""

    pass


class NetworkException(APIException):
    """Exception for transport and connection failures."""

    pass


class DecodeException(APIException):
    """Exception for response bodies that do not match the expected schema."""

    pass


class ServerException(APIException):
    """
    Exception for error responses reported by the API server.

    The string form is exactly the server's message so it can be shown
    to the user verbatim.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return self.message
