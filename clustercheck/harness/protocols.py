"""
Collaborators the handshake driver talks to. Any object with these
methods will do; TCPHarness implements all of them.
"""

from typing import Any, Protocol

from .models import EventPayload


class ConnectionHandle(Protocol):

    @property
    def name(self) -> str: ...

    async def send(self, message_type: str, fields: dict[str, Any]) -> None: ...


class ConnectionProvider(Protocol):

    async def connect(
        self,
        node_name: str,
        local_port: int,
        remote_port: int,
    ) -> ConnectionHandle:
        """Open a connection from local_port to remote_port. Raises ConnectionError."""
        ...


class EventSource(Protocol):

    async def wait_for_event(
        self,
        node_name: str,
        kind: str,
        timeout: float,
        fields: dict[str, Any] | None = None,
    ) -> EventPayload:
        """Return the first matching event. Raises TimeoutError."""
        ...


class StatusQuery(Protocol):

    def is_connected(self, node_name: str) -> bool: ...
