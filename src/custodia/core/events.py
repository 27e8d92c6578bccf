"""Event bus for workflow notifications and the approval trail.

Workflow and valuation components publish events after each successful
state change; subscribers (audit trail, notifications, "supply a price"
prompts) react without the core depending on them. Hooks can be sync or async.

Usage::

    from custodia.core.events import EventBus, EventRecorder, HOLDING_REVIEWED

    bus = EventBus()
    trail = EventRecorder(bus)

    async def notify(event):
        print(f"{event.payload['holding_id']} -> {event.payload['to']}")

    bus.on(HOLDING_REVIEWED, notify)
"""

from __future__ import annotations

import asyncio
import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from time import time
from typing import Any

from loguru import logger

# ---------------------------------------------------------------------------
# Well-known event names
# ---------------------------------------------------------------------------

HOLDING_SUBMITTED = "holding.submitted"
HOLDING_EDITED = "holding.edited"
HOLDING_REVIEWED = "holding.reviewed"
HOLDING_REMOVED = "holding.removed"
PRICE_RECORDED = "price.recorded"
VALUATION_PRICE_MISSING = "valuation.price_missing"
USER_REGISTERED = "user.registered"

# Type alias for hook callables (sync or async)
Hook = Any  # Callable[[Event], None] | Callable[[Event], Awaitable[None]]


@dataclass(frozen=True)
class Event:
    """An immutable event that flows through the bus."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)
    source: str = ""


class EventBus:
    """Simple pub/sub event bus supporting sync and async hooks.

    A failing hook is logged and skipped: subscribers can never undo or
    break the state change that produced the event.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)
        self._wildcard_hooks: list[Hook] = []
        self._background_tasks: set[asyncio.Task] = set()

    def on(self, event_name: str, hook: Hook) -> None:
        """Register *hook* for a specific event name."""
        self._hooks[event_name].append(hook)

    def on_all(self, hook: Hook) -> None:
        """Register *hook* for all events (wildcard)."""
        self._wildcard_hooks.append(hook)

    def off(self, event_name: str, hook: Hook) -> None:
        """Unregister *hook* from a specific event name."""
        try:
            self._hooks[event_name].remove(hook)
        except ValueError:
            pass

    async def emit(self, event: Event) -> None:
        """Emit an event, running all matching hooks in registration order."""
        hooks = list(self._hooks.get(event.name, []))
        hooks.extend(self._wildcard_hooks)
        for hook in hooks:
            try:
                if inspect.iscoroutinefunction(hook):
                    await hook(event)
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")

    def emit_sync(self, event: Event) -> None:
        """Emit from a sync context.

        Sync hooks run inline. Async hooks are scheduled as tasks when a loop
        is running and skipped otherwise.
        """
        hooks = list(self._hooks.get(event.name, []))
        hooks.extend(self._wildcard_hooks)

        loop: asyncio.AbstractEventLoop | None = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            pass

        for hook in hooks:
            try:
                if inspect.iscoroutinefunction(hook):
                    if loop is not None:
                        task = loop.create_task(hook(event))
                        self._background_tasks.add(task)
                        task.add_done_callback(self._background_tasks.discard)
                    else:
                        logger.debug(f"Skipping async hook {hook!r} for {event.name}: no running event loop")
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")

    async def publish(self, name: str, payload: dict[str, Any], *, source: str = "") -> Event:
        """Build and emit an event in one call; returns the emitted event."""
        event = Event(name=name, payload=payload, source=source)
        await self.emit(event)
        return event


class EventRecorder:
    """Wildcard subscriber that keeps every event in memory, in order.

    Serves as the (non tamper-evident) approval trail: who submitted,
    edited, reviewed, or removed which holding, and when.
    """

    def __init__(self, bus: EventBus | None = None) -> None:
        self.events: list[Event] = []
        if bus is not None:
            bus.on_all(self)

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def for_holding(self, holding_id: str) -> list[Event]:
        """Return the trail of a single holding."""
        return [e for e in self.events if e.payload.get("holding_id") == holding_id]
