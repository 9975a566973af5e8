"""Parse GraphQL response bodies from the Ackee API.

Two layers:

* :meth:`GraphQLResponseParser.unwrap` interprets the ``{data, errors}``
  envelope and turns API-reported errors into :class:`ResponseError`.
* The per-mutation decoders pull the single leaf value out of ``data``
  (``createRecord.payload.id``, ``updateRecord.success``,
  ``createAction.payload.id``) and raise :class:`DecodingError` when the
  nesting is not what the mutation asked for.
"""

from __future__ import annotations

from typing import Any, Dict

from ackee_analytics.errors import DecodingError, ResponseError, UnknownError


class GraphQLResponseParser:
    """Extract results from Ackee GraphQL response bodies."""

    # ------------------------------------------------------------------ #
    # Envelope
    # ------------------------------------------------------------------ #

    @classmethod
    def unwrap(cls, body: Any) -> Dict[str, Any]:
        """Return the ``data`` object of a response envelope.

        Errors win over data: a non-empty ``errors`` array fails with the
        first error's message even if partial data came back.
        """
        if not isinstance(body, dict):
            raise UnknownError(f"Response body is not a JSON object: {type(body).__name__}")

        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            message = first.get("message") if isinstance(first, dict) else None
            if isinstance(message, str):
                raise ResponseError(message)
            raise UnknownError(f"Error entry without a message: {first!r}")

        data = body.get("data")
        if data is None:
            raise UnknownError()
        if not isinstance(data, dict):
            raise DecodingError(TypeError(f"data: expected object, got {type(data).__name__}"))
        return data

    # ------------------------------------------------------------------ #
    # Per-mutation decoders
    # ------------------------------------------------------------------ #

    @classmethod
    def payload_id(cls, data: Dict[str, Any], mutation: str) -> str:
        """``{mutation: {payload: {id: str}}}`` -> id"""
        result = cls._field(data, mutation, "data")
        payload = cls._field(result, "payload", mutation)
        value = cls._field(payload, "id", f"{mutation}.payload")
        if not isinstance(value, str):
            raise DecodingError(
                TypeError(f"{mutation}.payload.id: expected string, got {type(value).__name__}")
            )
        return value

    @classmethod
    def record_id(cls, data: Dict[str, Any]) -> str:
        record_id = cls.payload_id(data, "createRecord")
        # A record handle must never be built around an empty id
        if not record_id:
            raise DecodingError(ValueError("createRecord.payload.id is empty"))
        return record_id

    @classmethod
    def action_id(cls, data: Dict[str, Any]) -> str:
        return cls.payload_id(data, "createAction")

    @classmethod
    def update_success(cls, data: Dict[str, Any]) -> bool:
        result = cls._field(data, "updateRecord", "data")
        value = cls._field(result, "success", "updateRecord")
        if not isinstance(value, bool):
            raise DecodingError(
                TypeError(f"updateRecord.success: expected bool, got {type(value).__name__}")
            )
        return value

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _field(obj: Any, key: str, where: str) -> Any:
        if not isinstance(obj, dict):
            raise DecodingError(TypeError(f"{where}: expected object, got {type(obj).__name__}"))
        if key not in obj:
            raise DecodingError(KeyError(f"{where}.{key}"))
        return obj[key]
