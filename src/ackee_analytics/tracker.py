"""AckeeTracker — the main entry point for recording visits and actions.

The fire-and-forget operations (record / update / action) schedule one
asyncio task each and never raise into the host application.  The
awaitable variants (create_record / update_record / create_action) raise
the typed errors from :mod:`ackee_analytics.errors` for callers who want
them.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Coroutine, Optional, Set, Union

import httpx

from ackee_analytics.errors import EncodingError, GraphQLError
from ackee_analytics.events import ActionInput, Attributes, Event, Record
from ackee_analytics.mutations import CreateAction, CreateRecord, UpdateRecord
from ackee_analytics.transport import GraphQLTransport

logger = logging.getLogger(__name__)

RecordSink = Callable[[Optional[Record]], None]
ErrorHook = Callable[[GraphQLError], None]
Scheduled = Union[asyncio.Task, concurrent.futures.Future]


class AckeeTracker:
    """Records visits and actions on an Ackee server.

    Usage — from UI code running on an event loop::

        tracker = AckeeTracker(
            url="https://stats.example.com/api",
            domain="domain_id",
        )

        # on appear: the sink receives a Record, or None on failure
        tracker.record("app.example/sheet", lambda r: setattr(sheet, "record", r))

        # on dismiss
        tracker.update(sheet.record)

        # anywhere
        tracker.action(Event(id="purchase", key="Price"), value=5)

        await tracker.close()

    Usage — from a worker thread or a sync GUI callback, once the tracker
    knows its loop (passed in, or captured on first on-loop call)::

        tracker = AckeeTracker(url, domain, loop=loop)
        tracker.action(PURCHASE)  # returns a concurrent.futures.Future

    Usage — awaiting results directly::

        record = await tracker.create_record("app.example/sheet")
    """

    def __init__(
        self,
        url: str,
        domain: str,
        default_attributes: Optional[Attributes] = None,
        *,
        is_enabled: bool = True,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        on_error: Optional[ErrorHook] = None,
        debug: bool = False,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.url = url
        self.domain = domain
        self.default_attributes = default_attributes or Attributes()
        self.is_enabled = is_enabled
        self.on_error = on_error

        self._transport = GraphQLTransport(url, client=client, timeout=timeout, debug=debug)
        self._pending: Set[asyncio.Task] = set()
        self._closed = False
        self._loop = loop

    @property
    def active(self) -> bool:
        return self.is_enabled and not self._closed

    # ------------------------------------------------------------------ #
    # Awaitable API
    # ------------------------------------------------------------------ #

    async def create_record(self, path: str) -> Record:
        """Create a record for ``path`` using a copy of the default attributes."""
        return await self._create_record(self.default_attributes.with_location(path))

    async def update_record(self, record: Record) -> bool:
        """Touch an existing record so the server extends its duration."""
        return await self._transport.send(UpdateRecord(record_id=record.id).request)

    async def create_action(self, event: Event, value: float = 1) -> str:
        """Log one action for ``event``; returns the server's action id."""
        try:
            amount = float(value)
        except (TypeError, ValueError) as exc:
            raise EncodingError(exc) from exc
        request = CreateAction(
            event_id=event.id,
            input=ActionInput(key=event.key, value=amount),
        ).request
        return await self._transport.send(request)

    async def _create_record(self, attributes: Attributes) -> Record:
        request = CreateRecord(domain_id=self.domain, input=attributes).request
        return Record(id=await self._transport.send(request))

    # ------------------------------------------------------------------ #
    # Fire-and-forget API
    # ------------------------------------------------------------------ #

    def record(self, path: str, sink: RecordSink) -> Optional[Scheduled]:
        """Create a record for ``path`` and hand the result to ``sink``.

        ``sink`` is called exactly once: with the new Record, or with
        None if anything went wrong, tracking is disabled, or there is no
        event loop to run the request on.  Results of calls still in
        flight when the tracker is closed are dropped.
        """
        if not self.active:
            self._deliver(sink, None)
            return None

        # Snapshot now; later edits to default_attributes must not leak in
        attributes = self.default_attributes.with_location(path)
        scheduled = self._spawn("record", partial(self._record, attributes, sink))
        if scheduled is None:
            self._deliver(sink, None)
        return scheduled

    def update(self, record: Optional[Record]) -> Optional[Scheduled]:
        """Update ``record`` in the background; no-op for None."""
        if record is None or not self.active:
            return None
        call = partial(self.update_record, record)
        return self._spawn("update", partial(self._swallow, "update", call))

    def action(self, event: Event, value: float = 1) -> Optional[Scheduled]:
        """Log an action in the background; failures are only logged."""
        if not self.active:
            return None
        call = partial(self.create_action, event, value)
        return self._spawn("action", partial(self._swallow, "action", call))

    async def _record(self, attributes: Attributes, sink: RecordSink) -> None:
        record: Optional[Record] = None
        try:
            record = await self._create_record(attributes)
        except GraphQLError as exc:
            self._report("record", exc)
        except Exception:
            logger.exception("Ackee record failed unexpectedly")
        self._deliver(sink, record)

    async def _swallow(self, operation: str, call: Callable[[], Awaitable[Any]]) -> None:
        try:
            result = await call()
            logger.debug("Ackee %s succeeded: %r", operation, result)
        except GraphQLError as exc:
            self._report(operation, exc)
        except Exception:
            logger.exception("Ackee %s failed unexpectedly", operation)

    # ------------------------------------------------------------------ #
    # Task bookkeeping
    # ------------------------------------------------------------------ #

    def _spawn(
        self, operation: str, start: Callable[[], Coroutine[Any, Any, None]]
    ) -> Optional[Scheduled]:
        """Run ``start()`` on the tracker's loop.

        On the loop thread this is a plain task.  From any other thread
        (or a sync callback while the loop runs elsewhere) the work is
        handed over with ``run_coroutine_threadsafe``.  With no running
        loop at all nothing is scheduled and None is returned.
        """
        try:
            running: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        bound = self._loop
        if running is not None and (bound is None or bound is running or not bound.is_running()):
            self._loop = running
            task = running.create_task(start())
            self.register_pending_task(task)
            return task

        loop = self._loop
        if loop is None or loop.is_closed() or not loop.is_running():
            logger.warning("Ackee %s dropped: no running event loop", operation)
            return None
        return asyncio.run_coroutine_threadsafe(self._adopt(start), loop)

    async def _adopt(self, start: Callable[[], Coroutine[Any, Any, None]]) -> None:
        # Runs on the loop thread, so the pending set is only touched there
        if self._closed:
            return
        task = asyncio.current_task()
        if task is not None:
            self.register_pending_task(task)
        await start()

    def register_pending_task(self, task: asyncio.Task) -> None:
        """Keep ``task`` alive until it finishes or the tracker closes."""
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def drain_pending(self) -> None:
        """Wait for every in-flight operation to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self, *, drain: bool = False) -> None:
        """Abandon (or, with ``drain=True``, finish) in-flight work and
        release the HTTP client."""
        self._closed = True
        if drain:
            await self.drain_pending()

        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.debug("Abandoned %d in-flight Ackee requests", len(pending))
        self._pending.clear()

        await self._transport.close()
        logger.info("AckeeTracker closed")

    async def __aenter__(self) -> "AckeeTracker":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------ #
    # Diagnostics
    # ------------------------------------------------------------------ #

    def _report(self, operation: str, exc: GraphQLError) -> None:
        logger.warning("Ackee %s failed: %s: %s", operation, type(exc).__name__, exc)
        if self.on_error is None:
            return
        try:
            self.on_error(exc)
        except Exception:
            logger.exception("Ackee on_error hook raised")

    @staticmethod
    def _deliver(sink: RecordSink, record: Optional[Record]) -> None:
        try:
            sink(record)
        except Exception:
            logger.exception("Ackee record sink raised")
