"""HTTPX event hooks that trace Ackee GraphQL traffic.

The transport installs these on the client it creates when
``debug=True``.  They can also be attached to an injected client::

    import httpx
    from ackee_analytics.client_hooks import GraphQLRequestLogHook, GraphQLResponseLogHook

    client = httpx.AsyncClient(
        event_hooks={
            "request": [GraphQLRequestLogHook()],
            "response": [GraphQLResponseLogHook()],
        },
    )
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from ackee_analytics.mutations import operation_name

logger = logging.getLogger(__name__)


def _operation(content: bytes) -> str:
    try:
        query = json.loads(content).get("query", "")
    except Exception:
        return "?"
    return operation_name(query) if isinstance(query, str) else "?"


class GraphQLRequestLogHook:
    """HTTPX request hook: logs the mutation about to be sent."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    async def __call__(self, request: httpx.Request) -> None:
        if not self.log.isEnabledFor(logging.DEBUG):
            return
        self.log.debug(
            "-> %s %s %s (%d bytes)",
            request.method,
            request.url,
            _operation(request.content),
            len(request.content),
        )


class GraphQLResponseLogHook:
    """HTTPX response hook: logs status, latency and body of each reply."""

    def __init__(self, log: Optional[logging.Logger] = None, max_body: int = 500) -> None:
        self.log = log or logger
        self.max_body = max_body

    async def __call__(self, response: httpx.Response) -> None:
        if not self.log.isEnabledFor(logging.DEBUG):
            return

        await response.aread()

        latency_ms: Any = "?"
        try:
            latency_ms = round(response.elapsed.total_seconds() * 1000, 2)
        except RuntimeError:
            pass

        self.log.debug(
            "<- %s %s %s in %sms: %s",
            response.status_code,
            response.request.method,
            response.request.url,
            latency_ms,
            response.text[: self.max_body],
        )
