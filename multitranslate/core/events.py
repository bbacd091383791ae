"""
Event sinks for streaming dispatch

A sink receives StreamEvent values from many provider tasks at once. Each event is
delivered whole; the dispatcher never waits on a sink longer than its put timeout.
"""
import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import AsyncIterator, Callable, List, Optional

from multitranslate.config import SINK_PUT_TIMEOUT, SINK_QUEUE_SIZE
from .exceptions import SinkDeliveryError
from .models import StreamEvent


class EventSink(ABC):
    """Multi-producer destination for stream events"""

    @abstractmethod
    async def emit(self, event: StreamEvent) -> None:
        """
        Deliver one event.

        Raises:
            SinkDeliveryError: if the event could not be accepted
        """
        pass


class QueueEventSink(EventSink):
    """
    Bounded asyncio.Queue sink.

    Producers wait at most `put_timeout` seconds for room; a consumer iterates the
    sink until the all-done sentinel arrives.

    Example:
        >>> sink = QueueEventSink()
        >>> task = asyncio.create_task(dispatcher.dispatch_stream(request, "req-1", sink))
        >>> async for event in sink:
        ...     print(event.to_dict())
    """

    def __init__(self, maxsize: int = SINK_QUEUE_SIZE, put_timeout: float = SINK_PUT_TIMEOUT):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.put_timeout = put_timeout
        self.closed = False

    async def emit(self, event: StreamEvent) -> None:
        if self.closed:
            raise SinkDeliveryError("Event sink is closed")
        try:
            await asyncio.wait_for(self._queue.put(event), timeout=self.put_timeout)
        except asyncio.TimeoutError:
            raise SinkDeliveryError(
                f"Event sink full, dropped event after {self.put_timeout}s"
            ) from None

    def close(self) -> None:
        """Refuse further events (the consumer went away)."""
        self.closed = True

    async def get(self) -> StreamEvent:
        return await self._queue.get()

    def __aiter__(self) -> AsyncIterator[StreamEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[StreamEvent]:
        while True:
            event = await self._queue.get()
            yield event
            if event.all_done:
                return


class CallbackEventSink(EventSink):
    """Sink that hands each event to a plain or async callable."""

    def __init__(self, callback: Callable[[StreamEvent], object]):
        self.callback = callback

    async def emit(self, event: StreamEvent) -> None:
        try:
            outcome = self.callback(event)
            if inspect.isawaitable(outcome):
                await outcome
        except SinkDeliveryError:
            raise
        except Exception as e:
            raise SinkDeliveryError(f"Event callback failed: {e}") from e


class CollectingEventSink(EventSink):
    """Keeps every event in memory, in delivery order."""

    def __init__(self):
        self.events: List[StreamEvent] = []

    async def emit(self, event: StreamEvent) -> None:
        self.events.append(event)

    def for_service(self, service: str) -> List[StreamEvent]:
        return [event for event in self.events if event.service == service]

    @property
    def sentinel(self) -> Optional[StreamEvent]:
        sentinels = [event for event in self.events if event.all_done]
        return sentinels[0] if sentinels else None
