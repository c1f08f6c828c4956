"""In-process event bus connecting the feedback ingestor and the evolution scheduler"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class CycleRequested:
    """An evolution cycle should run"""
    trigger: str  # "scheduled" | "feedback" | "market_change" | "performance_drop" | "user_request"
    reason: str = ""
    requested_at: datetime = field(default_factory=datetime.now)


class EventBus:
    """Async publish/subscribe keyed by event type.

    Handlers run sequentially in subscription order and publish() returns
    their results. A failing handler is logged and does not stop the others.
    """

    def __init__(self):
        self._handlers: dict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    def has_subscribers(self, event_type: type) -> bool:
        return bool(self._handlers.get(event_type))

    async def publish(self, event: Any) -> list[Any]:
        results = []
        for handler in list(self._handlers.get(type(event), [])):
            try:
                results.append(await handler(event))
            except Exception as e:
                logger.error("Handler for %s failed: %s", type(event).__name__, e)
        return results
