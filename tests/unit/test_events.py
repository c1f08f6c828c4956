"""Tests for the event bus"""
import pytest

from autodev.events import CycleRequested, EventBus


class Other:
    pass


@pytest.mark.asyncio
async def test_publish_returns_results_in_order():
    bus = EventBus()

    async def first(event):
        return f"first:{event.trigger}"

    async def second(event):
        return "second"

    bus.subscribe(CycleRequested, first)
    bus.subscribe(CycleRequested, second)

    assert await bus.publish(CycleRequested(trigger="feedback")) == ["first:feedback", "second"]


@pytest.mark.asyncio
async def test_publish_is_keyed_by_type():
    bus = EventBus()
    seen = []

    async def handler(event):
        seen.append(event)

    bus.subscribe(CycleRequested, handler)

    assert await bus.publish(Other()) == []
    assert seen == []


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    bus = EventBus()

    async def broken(event):
        raise RuntimeError("boom")

    async def working(event):
        return "ok"

    bus.subscribe(CycleRequested, broken)
    bus.subscribe(CycleRequested, working)

    assert await bus.publish(CycleRequested(trigger="scheduled")) == ["ok"]


@pytest.mark.asyncio
async def test_unsubscribe():
    bus = EventBus()

    async def handler(event):
        return "ok"

    bus.subscribe(CycleRequested, handler)
    assert bus.has_subscribers(CycleRequested)

    bus.unsubscribe(CycleRequested, handler)
    bus.unsubscribe(CycleRequested, handler)

    assert not bus.has_subscribers(CycleRequested)
    assert await bus.publish(CycleRequested(trigger="scheduled")) == []
