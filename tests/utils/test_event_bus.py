import logging
from unittest.mock import AsyncMock

import pytest

from models.enums import DashboardEventType, EventSource
from models.events import DashboardEvent
from utils.event_bus import EventBus

CATALOG = DashboardEventType.CATALOG_CHANGED
LOCATION = DashboardEventType.LOCATION_CHANGED


# Test Initialization
def test_event_bus_initialization():
    """Test that the EventBus initializes with an empty subscribers dict."""
    bus = EventBus()
    assert bus.subscribers == {}


# Test Subscription Logic
def test_subscribe_single_callback():
    """Test subscribing a single callback."""
    bus = EventBus()
    mock_callback = AsyncMock()

    bus.subscribe(CATALOG, mock_callback)

    assert bus.subscribers[CATALOG] == [mock_callback]
    assert bus.subscriber_count(CATALOG) == 1
    assert bus.subscriber_count(LOCATION) == 0


def test_subscribe_multiple_callbacks_different_events():
    """Test subscribing callbacks to different events."""
    bus = EventBus()
    mock_callback1 = AsyncMock(name="cb1")
    mock_callback2 = AsyncMock(name="cb2")

    bus.subscribe(CATALOG, mock_callback1)
    bus.subscribe(LOCATION, mock_callback2)

    assert bus.subscribers[CATALOG] == [mock_callback1]
    assert bus.subscribers[LOCATION] == [mock_callback2]


def test_subscribe_duplicate_callback(caplog):
    """Test that subscribing the exact same callback twice is ignored."""
    bus = EventBus()
    mock_callback = AsyncMock(name="cb_duplicate")

    with caplog.at_level(logging.WARNING):
        bus.subscribe(CATALOG, mock_callback)
        bus.subscribe(CATALOG, mock_callback)

    assert len(bus.subscribers[CATALOG]) == 1
    assert "already subscribed" in caplog.text


def test_subscribe_non_callable():
    """Test that subscribing a non-callable raises TypeError."""
    bus = EventBus()

    with pytest.raises(TypeError, match="Callback must be a callable async function."):
        bus.subscribe(CATALOG, "not a function")  # type: ignore [arg-type]

    assert CATALOG not in bus.subscribers


# Test Unsubscription Logic
def test_unsubscribe_last_callback():
    """Test unsubscribing the last callback removes the event type."""
    bus = EventBus()
    mock_callback = AsyncMock()

    bus.subscribe(CATALOG, mock_callback)
    bus.unsubscribe(CATALOG, mock_callback)

    assert CATALOG not in bus.subscribers


def test_unsubscribe_nonexistent_callback(caplog):
    """Test unsubscribing a callback not subscribed to the event logs warning."""
    bus = EventBus()
    bus.subscribe(CATALOG, AsyncMock(name="cb1"))

    with caplog.at_level(logging.WARNING):
        bus.unsubscribe(CATALOG, AsyncMock(name="cb2_not_subscribed"))

    assert len(bus.subscribers[CATALOG]) == 1
    assert "Callback AsyncMock not found" in caplog.text


def test_unsubscribe_from_nonexistent_event_type():
    """Test unsubscribing from an event type with no subscribers."""
    bus = EventBus()
    bus.unsubscribe(LOCATION, AsyncMock())
    assert LOCATION not in bus.subscribers


# Test Publishing Logic


def create_test_event(event_type: DashboardEventType, payload: dict | None = None) -> DashboardEvent:
    return DashboardEvent(
        event_type=event_type,
        payload=payload if payload is not None else {},
        source=EventSource.TEST,
    )


@pytest.mark.asyncio
async def test_publish_calls_correct_subscribers():
    """Test that publish calls all and only the correct subscribers."""
    bus = EventBus()
    mock_callback_a1 = AsyncMock(name="cb_a1")
    mock_callback_a2 = AsyncMock(name="cb_a2")
    mock_callback_b1 = AsyncMock(name="cb_b1")

    bus.subscribe(CATALOG, mock_callback_a1)
    bus.subscribe(CATALOG, mock_callback_a2)
    bus.subscribe(LOCATION, mock_callback_b1)

    event = create_test_event(CATALOG, {"revision": 3})
    await bus.publish(event)

    mock_callback_a1.assert_called_once_with(event)
    mock_callback_a2.assert_called_once_with(event)
    mock_callback_b1.assert_not_called()


@pytest.mark.asyncio
async def test_publish_no_subscribers():
    """Test publishing an event with no subscribers."""
    bus = EventBus()
    await bus.publish(create_test_event(DashboardEventType.VIEW_CHANGED))


@pytest.mark.asyncio
async def test_publish_with_callback_exception(caplog):
    """Test that publish handles exceptions in callbacks gracefully."""
    bus = EventBus()
    mock_callback_ok = AsyncMock(name="cb_ok")
    failing_callback = AsyncMock(name="cb_fail", side_effect=ValueError("Callback failed!"))

    bus.subscribe(CATALOG, mock_callback_ok)
    bus.subscribe(CATALOG, failing_callback)

    event = create_test_event(CATALOG)

    with caplog.at_level(logging.ERROR):
        await bus.publish(event)

    mock_callback_ok.assert_called_once_with(event)
    failing_callback.assert_called_once_with(event)
    assert "Error in subscriber callback 'AsyncMock'" in caplog.text
    assert "Callback failed!" in caplog.text


@pytest.mark.asyncio
async def test_callback_may_unsubscribe_during_publish():
    """A subscriber removing itself while handling must not disturb the others."""
    bus = EventBus()
    other = AsyncMock(name="other")

    async def once(event):
        bus.unsubscribe(CATALOG, once)

    bus.subscribe(CATALOG, once)
    bus.subscribe(CATALOG, other)

    await bus.publish(create_test_event(CATALOG))

    other.assert_called_once()
    assert bus.subscribers[CATALOG] == [other]


@pytest.mark.asyncio
async def test_publish_invalid_event_object(caplog):
    """Test publishing an object that is not a DashboardEvent."""
    bus = EventBus()
    mock_callback = AsyncMock(name="cb1")
    bus.subscribe(CATALOG, mock_callback)

    invalid_event = {"event_type": CATALOG, "payload": {}}

    with caplog.at_level(logging.ERROR):
        await bus.publish(invalid_event)  # type: ignore [arg-type]

    assert f"Attempted to publish invalid event type: {type(invalid_event)}" in caplog.text
    mock_callback.assert_not_called()
