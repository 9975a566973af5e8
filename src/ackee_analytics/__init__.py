"""Ackee Analytics — visit and action tracking against an Ackee server.

Records page/screen visits and app-defined actions through Ackee's
GraphQL API.  Tracking never raises into the host application: failures
end up in the log (and the optional ``on_error`` hook) instead.

Integration points:
    1. Fire-and-forget — tracker.record() / update() / action()
    2. Awaitable       — await tracker.create_record() and friends
    3. HTTPX hooks     — request/response tracing for debugging
"""

from ackee_analytics.client_hooks import GraphQLRequestLogHook, GraphQLResponseLogHook
from ackee_analytics.errors import (
    DecodingError,
    EncodingError,
    GraphQLError,
    NetworkError,
    ResponseError,
    UnknownError,
)
from ackee_analytics.events import ActionInput, Attributes, Event, Record
from ackee_analytics.parser import GraphQLResponseParser
from ackee_analytics.tracker import AckeeTracker
from ackee_analytics.transport import GraphQLTransport

__all__ = [
    "AckeeTracker",
    "Attributes",
    "Event",
    "Record",
    "ActionInput",
    "GraphQLTransport",
    "GraphQLResponseParser",
    "GraphQLRequestLogHook",
    "GraphQLResponseLogHook",
    "GraphQLError",
    "EncodingError",
    "NetworkError",
    "ResponseError",
    "DecodingError",
    "UnknownError",
]

__version__ = "0.1.0"
