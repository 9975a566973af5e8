"""Tests for the GraphQL request/response log hooks."""

import json
import logging
from datetime import timedelta

import httpx

from ackee_analytics.client_hooks import GraphQLRequestLogHook, GraphQLResponseLogHook, _operation
from ackee_analytics.mutations import UPDATE_RECORD_QUERY

URL = "https://stats.example.com/api"


def _request(query: str = UPDATE_RECORD_QUERY) -> httpx.Request:
    content = json.dumps({"query": query, "variables": {"recordId": "r"}}).encode()
    return httpx.Request("POST", URL, content=content)


class TestGraphQLRequestLogHook:
    async def test_logs_operation_name(self, caplog):
        hook = GraphQLRequestLogHook()

        with caplog.at_level(logging.DEBUG, logger="ackee_analytics.client_hooks"):
            await hook(_request())

        assert "updateRecord" in caplog.text
        assert URL in caplog.text

    async def test_non_json_body(self, caplog):
        hook = GraphQLRequestLogHook()
        request = httpx.Request("POST", URL, content=b"not json")

        with caplog.at_level(logging.DEBUG, logger="ackee_analytics.client_hooks"):
            await hook(request)

        assert "?" in caplog.text

    async def test_silent_above_debug(self, caplog):
        hook = GraphQLRequestLogHook()

        with caplog.at_level(logging.INFO, logger="ackee_analytics.client_hooks"):
            await hook(_request())

        assert caplog.text == ""


class TestGraphQLResponseLogHook:
    async def test_logs_status_and_body(self, caplog):
        hook = GraphQLResponseLogHook()
        response = httpx.Response(
            200,
            request=_request(),
            json={"data": {"updateRecord": {"success": True}}},
        )
        response._elapsed = timedelta(milliseconds=42)

        with caplog.at_level(logging.DEBUG, logger="ackee_analytics.client_hooks"):
            await hook(response)

        assert "200" in caplog.text
        assert "success" in caplog.text
        assert "42.0ms" in caplog.text

    async def test_truncates_body(self, caplog):
        hook = GraphQLResponseLogHook(max_body=10)
        response = httpx.Response(200, request=_request(), text="x" * 100)
        response._elapsed = timedelta(milliseconds=1)

        with caplog.at_level(logging.DEBUG, logger="ackee_analytics.client_hooks"):
            await hook(response)

        assert "x" * 10 in caplog.text
        assert "x" * 11 not in caplog.text

    async def test_custom_logger(self, caplog):
        log = logging.getLogger("host.analytics")
        hook = GraphQLResponseLogHook(log=log)
        response = httpx.Response(500, request=_request(), text="boom")
        response._elapsed = timedelta(milliseconds=1)

        with caplog.at_level(logging.DEBUG, logger="host.analytics"):
            await hook(response)

        assert caplog.records[0].name == "host.analytics"


def test_operation_name_missing_query():
    assert _operation(b'{"variables": {}}') == "?"
    assert _operation(b"[1, 2]") == "?"
