"""
Custom exception classes for the application.

This module defines custom exceptions for better error handling and
more specific error reporting throughout the application. Every
`AppException` knows the HTTP status it maps to and how to render itself
as the structured `{"error": ...}` body returned by the CRUD endpoints.
"""

from typing import Any


class AppException(Exception):
    """
    Base class for errors that are reported to HTTP clients.

    Attributes:
        message: Human readable error message sent to the client.
        http_status: HTTP status code used for the response.
    """

    http_status: int = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response_body(self) -> dict[str, Any]:
        """
        Build the structured JSON error body.

        Returns:
            Dictionary with an `error` field and optional `details`.
        """
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class MissingBodyError(AppException):
    """
    Request body is missing.

    Raised when a client omits the request body on an endpoint that
    requires one (creating or updating a todo).
    """

    http_status = 400

    def __init__(self, message: str = "Missing request body"):
        super().__init__(message)


class InvalidBodyError(AppException):
    """Request body is present but does not match the expected shape."""

    http_status = 422


class TodoNotFoundError(AppException):
    """
    Todo does not exist.

    Raised by the store when updating a todo with an unknown ID.
    """

    http_status = 404

    def __init__(self, todo_id: int):
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id


class RenderCancelled(Exception):
    """Rendering was cancelled because the client went away."""


class ChannelClosedError(Exception):
    """
    Push attempted on a live reload channel that is already closed.

    Raised by channel implementations from `send()`. The connection
    registry isolates it so other channels still receive the message.
    """
