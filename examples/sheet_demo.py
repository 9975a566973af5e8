#!/usr/bin/env python3
"""
Sheet Demo — visit, action, dismiss
====================================

Simulates a screen that is presented, records a purchase, and is then
dismissed:

  1. on appear   -> tracker.record(path, sink)   (sink stores the Record)
  2. "Buy"       -> tracker.action(PURCHASE, value=5)
  3. on dismiss  -> tracker.update(record)

A small in-process Ackee backend (httpx.MockTransport) answers the
GraphQL mutations, so no server is needed.  Pass --fail to make the
backend reject every request and watch tracking degrade silently.

Run:
    python examples/sheet_demo.py [--fail]
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import sys
from typing import Optional

import httpx

from ackee_analytics import (
    AckeeTracker,
    Attributes,
    Event,
    GraphQLRequestLogHook,
    GraphQLResponseLogHook,
    Record,
)
from ackee_analytics.mutations import operation_name

# ======================================================================
# Mini Ackee backend
# ======================================================================

_ids = itertools.count(1)


def ackee_backend(fail: bool):
    async def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if fail:
            return httpx.Response(
                200, json={"data": None, "errors": [{"message": "Domain not found"}]}
            )

        operation = operation_name(body["query"])
        if operation == "updateRecord":
            data = {"updateRecord": {"success": True}}
        else:
            data = {operation: {"payload": {"id": f"{operation}_{next(_ids)}"}}}
        return httpx.Response(200, json={"data": data, "errors": None})

    return handler


# ======================================================================
# "UI"
# ======================================================================

PURCHASE = Event(id="eventId", key="Price")


class Sheet:
    path = "app.structured.today/sheet"

    def __init__(self, tracker: AckeeTracker):
        self.tracker = tracker
        self.record: Optional[Record] = None

    def _set_record(self, record: Optional[Record]) -> None:
        self.record = record
        print(f"   sheet.record = {record}")

    def on_appear(self) -> None:
        print("-> appear")
        self.tracker.record(self.path, self._set_record)

    def buy(self) -> None:
        print("-> buy")
        self.tracker.action(PURCHASE, value=5)

    def on_disappear(self) -> None:
        print("-> dismiss")
        self.tracker.update(self.record)


async def main(fail: bool) -> None:
    logging.basicConfig(level=logging.DEBUG, format="   %(name)s %(levelname)s %(message)s")
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    client = httpx.AsyncClient(
        transport=httpx.MockTransport(ackee_backend(fail)),
        event_hooks={
            "request": [GraphQLRequestLogHook()],
            "response": [GraphQLResponseLogHook()],
        },
    )
    tracker = AckeeTracker(
        url="https://stats.example.com/api",
        domain="domain_id",
        default_attributes=Attributes(
            os_version="17.4",
            device_name="iPhone",
            screen_width=390,
            screen_height=844,
        ),
        client=client,
    )

    sheet = Sheet(tracker)
    sheet.on_appear()
    await asyncio.sleep(0.1)
    sheet.buy()
    await asyncio.sleep(0.1)
    sheet.on_disappear()

    await tracker.close(drain=True)
    await client.aclose()


if __name__ == "__main__":
    asyncio.run(main(fail="--fail" in sys.argv))
