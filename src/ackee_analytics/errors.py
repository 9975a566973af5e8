"""Error taxonomy for the GraphQL request pipeline.

Every failure of a single request surfaces as one :class:`GraphQLError`
subclass, so callers can catch them all with one ``except`` clause while
still telling the failure modes apart.  None of them are retried.
"""

from __future__ import annotations

from typing import Optional


class GraphQLError(Exception):
    """Base exception for all ackee_analytics request failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class EncodingError(GraphQLError):
    """Raised when the request body cannot be serialized to JSON.

    No network request is attempted.
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Failed to encode request: {cause}", cause)


class NetworkError(GraphQLError):
    """Raised when the HTTP exchange itself fails (connect, timeout, TLS)."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Request failed: {cause}", cause)


class ResponseError(GraphQLError):
    """Raised when the API reports an error in the ``errors`` array.

    Attributes:
        message: The first error's message as sent by the server.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DecodingError(GraphQLError):
    """Raised when ``data`` does not have the shape the mutation expects."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Unexpected response shape: {cause}", cause)


class UnknownError(GraphQLError):
    """Raised when the response carries neither usable data nor errors."""

    def __init__(self, detail: str = "", cause: Optional[BaseException] = None) -> None:
        super().__init__(detail or "Response contained neither data nor errors", cause)
