"""Stream status polling.

A :class:`StreamStatusPoller` owns at most one :class:`StreamSubscription`.
Each subscription fetches its stream immediately and then once per interval,
without waiting for earlier fetches to finish. Responses are tagged with a
sequence number so a slow early response never overwrites a newer snapshot,
and a live flag blocks every delivery once the subscription is cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from .config import get_settings
from .models import Stream
from .obs.logging import stream_id_ctx

logger = logging.getLogger("livedrop.poller")

FetchStream = Callable[[str], Awaitable[Stream]]
DeliverSnapshot = Callable[[Stream], None]


class StreamSubscription:
    """One polling loop for one stream id."""

    def __init__(
        self,
        stream_id: str,
        fetch: FetchStream,
        deliver: DeliverSnapshot,
        interval: float,
    ) -> None:
        self.stream_id = stream_id
        self.interval = interval
        self._fetch = fetch
        self._deliver = deliver
        self._sequence = 0
        self._applied = 0
        self._live = True
        self._loop_task: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def live(self) -> bool:
        return self._live

    @property
    def applied_sequence(self) -> int:
        """Sequence number of the last delivered snapshot, 0 if none."""
        return self._applied

    def start(self) -> None:
        if self._loop_task is not None or not self._live:
            return
        self._loop_task = asyncio.create_task(
            self._run(), name=f"stream-poll:{self.stream_id}"
        )

    async def _run(self) -> None:
        stream_id_ctx.set(self.stream_id)
        logger.debug("polling every %.1fs", self.interval)
        while self._live:
            task = asyncio.create_task(self.refresh())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
            await asyncio.sleep(self.interval)

    async def refresh(self) -> bool:
        """Fetch once and deliver the result if it is still the freshest.

        Returns ``True`` when the snapshot was delivered. Fetch failures are
        logged and swallowed so one bad poll never stops the loop.
        """
        if not self._live:
            return False
        self._sequence += 1
        seq = self._sequence
        try:
            snapshot = await self._fetch(self.stream_id)
        except Exception as exc:  # network, HTTP or decoding error
            logger.warning("poll #%d for stream %s failed: %s", seq, self.stream_id, exc)
            return False

        if not self._live:
            logger.debug("dropping poll #%d after unsubscribe", seq)
            return False
        if seq < self._applied:
            logger.debug("dropping stale poll #%d (applied #%d)", seq, self._applied)
            return False
        self._applied = seq
        self._deliver(snapshot)
        return True

    def cancel(self) -> None:
        """Stop polling; pending and future responses are never delivered."""
        if not self._live:
            return
        self._live = False
        if self._loop_task is not None:
            self._loop_task.cancel()
        for task in list(self._inflight):
            task.cancel()
        logger.debug("unsubscribed from stream %s", self.stream_id)

    async def wait_closed(self) -> None:
        """Wait for the cancelled loop and in-flight fetches to unwind."""
        tasks = [t for t in (self._loop_task, *self._inflight) if t is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


class StreamStatusPoller:
    """Keeps a single stream subscription per consumer.

    ``watch`` always cancels the previous subscription before starting a new
    one, so two loops never write the same consumer's snapshot.
    """

    def __init__(
        self,
        fetch: FetchStream,
        on_snapshot: DeliverSnapshot,
        interval: float | None = None,
    ) -> None:
        self._fetch = fetch
        self._on_snapshot = on_snapshot
        self.interval = interval if interval is not None else get_settings().poll_interval
        self._current: StreamSubscription | None = None

    @property
    def subscription(self) -> StreamSubscription | None:
        return self._current

    def watch(self, stream_id: str | None) -> StreamSubscription | None:
        """Start polling ``stream_id``; an empty id only unsubscribes."""
        self.unsubscribe()
        if not stream_id:
            return None
        sub = StreamSubscription(stream_id, self._fetch, self._on_snapshot, self.interval)
        self._current = sub
        sub.start()
        return sub

    def unsubscribe(self) -> None:
        if self._current is not None:
            self._current.cancel()
            self._current = None

    async def aclose(self) -> None:
        sub = self._current
        self.unsubscribe()
        if sub is not None:
            await sub.wait_closed()

    async def __aenter__(self) -> "StreamStatusPoller":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
