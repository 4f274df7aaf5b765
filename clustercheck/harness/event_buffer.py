import asyncio
from typing import Any

from .models import EventPayload


class EventBuffer:
    """
    Recorded events for one connection, in arrival order. Waiters are
    resolved as soon as a matching event is recorded.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._events: list[EventPayload] = []
        self._waiters: list[
            tuple[str, dict[str, Any] | None, asyncio.Future]
        ] = []

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> tuple[EventPayload, ...]:
        return tuple(self._events)

    def record(self, event: EventPayload):
        self._events.append(event)

        for kind, fields, waiter in list(self._waiters):
            if waiter.done():
                continue

            if event.kind == kind and event.matches(fields):
                waiter.set_result(event)

    def find(
        self,
        kind: str,
        fields: dict[str, Any] | None = None,
    ) -> EventPayload | None:
        for event in self._events:
            if event.kind == kind and event.matches(fields):
                return event

        return None

    async def wait_for(
        self,
        kind: str,
        timeout: float,
        fields: dict[str, Any] | None = None,
    ) -> EventPayload:
        """Raises asyncio.TimeoutError if no matching event arrives in time."""
        if (event := self.find(kind, fields)) is not None:
            return event

        waiter = asyncio.get_running_loop().create_future()
        entry = (kind, fields, waiter)
        self._waiters.append(entry)

        try:
            return await asyncio.wait_for(waiter, timeout=timeout)

        finally:
            self._waiters.remove(entry)

    def clear(self):
        """Drop recorded events. Waiters only match events recorded later."""
        self._events.clear()
