"""Async GraphQL-over-HTTP transport for the Ackee API.

``send()`` runs one request through encode -> POST -> envelope -> decode
and either returns the decoded result or raises exactly one
:class:`~ackee_analytics.errors.GraphQLError` subclass.  There are no
retries and no timeout beyond the HTTPX default.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, TypeVar

import httpx

from ackee_analytics.client_hooks import GraphQLRequestLogHook, GraphQLResponseLogHook
from ackee_analytics.errors import DecodingError, EncodingError, GraphQLError, NetworkError, UnknownError
from ackee_analytics.mutations import GraphQLRequest
from ackee_analytics.parser import GraphQLResponseParser

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTENT_TYPE = "application/json; charset=utf-8"


class GraphQLTransport:
    """POSTs GraphQL requests to a single endpoint.

    The HTTPX client is created lazily on first use unless one is passed
    in.  An injected client is never closed by the transport.
    Once closed, the transport refuses to send rather than reopen a client.
    """

    def __init__(
        self,
        url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        debug: bool = False,
    ):
        self.url = url
        self.timeout = timeout
        self.debug = debug

        self._client = client
        self._owns_client = client is None
        self._closed = False

    # -- lazy init --

    def _get_client(self) -> httpx.AsyncClient:
        if self._closed:
            raise NetworkError(RuntimeError("transport closed"))
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.timeout is not None:
                kwargs["timeout"] = self.timeout
            if self.debug:
                kwargs["event_hooks"] = {
                    "request": [GraphQLRequestLogHook()],
                    "response": [GraphQLResponseLogHook()],
                }
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    # -- public API --

    @staticmethod
    def encode(request: GraphQLRequest[Any]) -> bytes:
        try:
            return json.dumps(request.to_payload(), allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise EncodingError(exc) from exc

    async def send(self, request: GraphQLRequest[T]) -> T:
        body = self.encode(request)

        try:
            response = await self._get_client().post(
                self.url,
                content=body,
                headers={"Content-Type": CONTENT_TYPE},
            )
        except httpx.HTTPError as exc:
            raise NetworkError(exc) from exc

        try:
            envelope = response.json()
        except ValueError as exc:
            raise UnknownError(
                f"Response body is not JSON (HTTP {response.status_code})", exc
            ) from exc

        data = GraphQLResponseParser.unwrap(envelope)
        try:
            return request.decode(data)
        except GraphQLError:
            raise
        except Exception as exc:
            raise DecodingError(exc) from exc

    async def close(self):
        self._closed = True
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
