"""Unit tests for stream event sinks."""

import asyncio

import pytest
from multitranslate.core.events import CallbackEventSink, CollectingEventSink, QueueEventSink
from multitranslate.core.exceptions import SinkDeliveryError
from multitranslate.core.models import StreamEvent


class TestQueueEventSink:
    """Test the bounded queue sink."""

    @pytest.mark.asyncio
    async def test_iteration_stops_after_sentinel(self):
        """Async iteration yields events up to and including the sentinel."""
        sink = QueueEventSink()
        await sink.emit(StreamEvent.partial("r1", "OpenAI", "Bon"))
        await sink.emit(StreamEvent.completed("r1", "OpenAI", "Bon"))
        await sink.emit(StreamEvent.sentinel("r1"))

        events = [event async for event in sink]

        assert len(events) == 3
        assert events[-1].all_done

    @pytest.mark.asyncio
    async def test_full_queue_raises_after_timeout(self):
        """A producer gives up instead of blocking forever."""
        sink = QueueEventSink(maxsize=1, put_timeout=0.01)
        await sink.emit(StreamEvent.partial("r1", "OpenAI", "a"))

        with pytest.raises(SinkDeliveryError):
            await sink.emit(StreamEvent.partial("r1", "OpenAI", "b"))

    @pytest.mark.asyncio
    async def test_closed_sink_refuses_events(self):
        """A closed sink raises SinkDeliveryError."""
        sink = QueueEventSink()
        sink.close()

        with pytest.raises(SinkDeliveryError):
            await sink.emit(StreamEvent.sentinel("r1"))

    @pytest.mark.asyncio
    async def test_concurrent_producers(self):
        """Events from many producers arrive whole."""
        sink = QueueEventSink()

        async def produce(service):
            for index in range(5):
                await sink.emit(StreamEvent.partial("r1", service, str(index)))

        await asyncio.gather(*(produce(name) for name in ("A", "B", "C")))
        await sink.emit(StreamEvent.sentinel("r1"))

        events = [event async for event in sink]
        for name in ("A", "B", "C"):
            assert [e.delta for e in events if e.service == name] == ["0", "1", "2", "3", "4"]


class TestCallbackEventSink:
    """Test the callback sink."""

    @pytest.mark.asyncio
    async def test_plain_callback(self):
        """A plain function receives each event."""
        received = []
        sink = CallbackEventSink(received.append)

        await sink.emit(StreamEvent.sentinel("r1"))

        assert received == [StreamEvent.sentinel("r1")]

    @pytest.mark.asyncio
    async def test_async_callback(self):
        """A coroutine function is awaited."""
        received = []

        async def callback(event):
            received.append(event.request_id)

        await CallbackEventSink(callback).emit(StreamEvent.sentinel("r2"))
        assert received == ["r2"]

    @pytest.mark.asyncio
    async def test_callback_failure_becomes_delivery_error(self):
        """Exceptions from the callback surface as SinkDeliveryError."""
        def callback(event):
            raise ConnectionError("client gone")

        with pytest.raises(SinkDeliveryError, match="client gone"):
            await CallbackEventSink(callback).emit(StreamEvent.sentinel("r1"))


class TestCollectingEventSink:
    """Test the in-memory sink."""

    @pytest.mark.asyncio
    async def test_filters_by_service(self):
        """for_service and sentinel select the right events."""
        sink = CollectingEventSink()
        await sink.emit(StreamEvent.completed("r1", "DeepL", "x"))
        await sink.emit(StreamEvent.sentinel("r1"))

        assert len(sink.for_service("DeepL")) == 1
        assert sink.sentinel.all_done
