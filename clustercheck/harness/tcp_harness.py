"""
Default asyncio TCP harness.

Simulated nodes connect to the SUT from fixed source ports, and the SUT's
own control connection (``ipc`` by default) is accepted through listen().
Every connection records what it sends and receives into an EventBuffer
that handshake verification waits on.
"""

from __future__ import annotations

import asyncio
import socket
from typing import Any

from clustercheck.env import Env
from clustercheck.logging import Logger
from clustercheck.logging.clustercheck_logging_models import (
    ConnectionDebug,
    ConnectionFailure,
    ConnectionWarning,
)

from .codec import DEFAULT_MAX_FRAME_SIZE, FrameReader, frame_event
from .errors import (
    EventTimeoutError,
    FrameDecodeError,
    FrameTooLargeError,
    HarnessConnectionError,
)
from .event_buffer import EventBuffer
from .models import EventKind, EventPayload


class HarnessConnection:
    def __init__(
        self,
        name: str,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        buffer: EventBuffer,
        logger: Logger,
        max_frame_size: int = DEFAULT_MAX_FRAME_SIZE,
    ) -> None:
        self._name = name
        self._reader = reader
        self._writer = writer
        self._buffer = buffer
        self._logger = logger
        self._max_frame_size = max_frame_size
        self._frames = FrameReader(max_frame_size=max_frame_size)
        self._read_task: asyncio.Task | None = None
        self._closed = False

        peer = writer.get_extra_info("peername")
        if isinstance(peer, tuple):
            self._host, self._port = peer[0], peer[1]

        else:
            self._host, self._port = str(peer or ""), 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def buffer(self) -> EventBuffer:
        return self._buffer

    def is_connected(self) -> bool:
        return self._closed is False and self._writer.is_closing() is False

    def start(self):
        self._read_task = asyncio.create_task(self._read_loop())

    async def send(self, message_type: str, fields: dict[str, Any]) -> None:
        if self.is_connected() is False:
            raise HarnessConnectionError(self._name, "not connected")

        message_type = str(getattr(message_type, "value", message_type))

        try:
            self._writer.write(
                frame_event(
                    message_type,
                    fields,
                    max_frame_size=self._max_frame_size,
                )
            )
            await self._writer.drain()

        except (ConnectionError, OSError) as err:
            raise HarnessConnectionError(self._name, f"send failed - {err}")

        self._buffer.record(
            EventPayload(
                kind=EventKind.sent(message_type),
                node_name=self._name,
                message_type=message_type,
                fields=dict(fields),
            )
        )

    async def close(self):
        self._closed = True

        if self._read_task and not self._read_task.done():
            self._read_task.cancel()

            try:
                await self._read_task

            except asyncio.CancelledError:
                pass

        await self._close_writer()

    async def _close_writer(self):
        if self._writer.is_closing() is False:
            self._writer.close()

        try:
            await self._writer.wait_closed()

        except (ConnectionError, OSError):
            # Peer already reset the connection.
            pass

    async def _read_loop(self):
        try:
            while True:
                data = await self._reader.read(4096)
                if not data:
                    break

                for message_type, fields in self._frames.feed(data):
                    self._buffer.record(
                        EventPayload(
                            kind=EventKind.received(message_type),
                            node_name=self._name,
                            message_type=message_type,
                            fields=fields,
                        )
                    )

        except (FrameTooLargeError, FrameDecodeError) as err:
            await self._logger.log(
                ConnectionFailure(
                    message=f"Dropping connection after invalid frame - {err}",
                    connection=self._name,
                    host=self._host,
                    port=self._port,
                )
            )

        except (ConnectionError, OSError) as err:
            await self._logger.log(
                ConnectionWarning(
                    message=f"Connection lost - {err}",
                    connection=self._name,
                    host=self._host,
                    port=self._port,
                )
            )

        finally:
            self._closed = True

            if self._writer.is_closing() is False:
                self._writer.close()


class TCPHarness:
    """
    Connection provider, event source and status query over loopback TCP.

    Example usage:
        async with TCPHarness.from_env(env) as harness:
            await harness.listen("ipc", path="/tmp/test_ipc.sock")
            # ... start the SUT ...
            report = await run_verification(topology, harness=harness)
    """

    def __init__(
        self,
        sut_host: str = "127.0.0.1",
        source_host: str = "0.0.0.0",
        connect_timeout: float = 5.0,
        connect_retries: int = 3,
        retry_interval: float = 0.5,
        max_frame_size: int = DEFAULT_MAX_FRAME_SIZE,
        logger: Logger | None = None,
    ) -> None:
        self._sut_host = sut_host
        self._source_host = source_host
        self._connect_timeout = connect_timeout
        self._connect_retries = max(connect_retries, 1)
        self._retry_interval = retry_interval
        self._max_frame_size = max_frame_size
        self._logger = logger or Logger()

        self._connections: dict[str, HarnessConnection] = {}
        self._buffers: dict[str, EventBuffer] = {}
        self._servers: dict[str, asyncio.AbstractServer] = {}

    @classmethod
    def from_env(cls, env: Env, logger: Logger | None = None) -> TCPHarness:
        return cls(
            **env.get_harness_config(),
            logger=logger,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _buffer_for(self, name: str) -> EventBuffer:
        if (buffer := self._buffers.get(name)) is None:
            buffer = EventBuffer(name)
            self._buffers[name] = buffer

        return buffer

    def _register(
        self,
        name: str,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> HarnessConnection:
        # Events from an earlier connection under this name must not
        # satisfy waits on the new one. Pending waiters stay registered.
        buffer = self._buffer_for(name)
        buffer.clear()

        connection = HarnessConnection(
            name,
            reader,
            writer,
            buffer,
            self._logger,
            max_frame_size=self._max_frame_size,
        )

        self._connections[name] = connection
        connection.start()

        return connection

    async def connect(
        self,
        node_name: str,
        local_port: int,
        remote_port: int,
    ) -> HarnessConnection:
        if (
            existing := self._connections.get(node_name)
        ) and existing.is_connected():
            raise HarnessConnectionError(node_name, "already connected")

        reader, writer = await self._open_connection(
            node_name,
            local_port,
            remote_port,
        )

        await self._logger.log(
            ConnectionDebug(
                message=f"Connected from port {local_port}",
                connection=node_name,
                host=self._sut_host,
                port=remote_port,
            )
        )

        return self._register(node_name, reader, writer)

    async def _open_connection(
        self,
        node_name: str,
        local_port: int,
        remote_port: int,
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        loop = asyncio.get_running_loop()
        last_error: Exception | None = None

        for attempt in range(self._connect_retries):
            tcp_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            tcp_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            tcp_socket.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            tcp_socket.setblocking(False)

            try:
                tcp_socket.bind((self._source_host, local_port))
                await asyncio.wait_for(
                    loop.sock_connect(tcp_socket, (self._sut_host, remote_port)),
                    timeout=self._connect_timeout,
                )

                return await asyncio.open_connection(sock=tcp_socket)

            except ConnectionRefusedError as connection_error:
                tcp_socket.close()
                last_error = connection_error

            except asyncio.TimeoutError:
                tcp_socket.close()
                last_error = TimeoutError(
                    f"connect timed out after {self._connect_timeout}s"
                )

            except OSError as err:
                tcp_socket.close()
                await self._log_connect_failure(node_name, remote_port, err)
                raise HarnessConnectionError(
                    node_name,
                    f"cannot connect from port {local_port} to {self._sut_host}:{remote_port} - {err}",
                )

            if attempt + 1 < self._connect_retries:
                await asyncio.sleep(self._retry_interval)

        await self._log_connect_failure(node_name, remote_port, last_error)
        raise HarnessConnectionError(
            node_name,
            f"cannot connect from port {local_port} to {self._sut_host}:{remote_port} "
            f"after {self._connect_retries} attempts - {last_error}",
        )

    async def _log_connect_failure(
        self,
        node_name: str,
        remote_port: int,
        err: Exception | None,
    ):
        await self._logger.log(
            ConnectionFailure(
                message=f"Connect failed - {err}",
                connection=node_name,
                host=self._sut_host,
                port=remote_port,
            )
        )

    async def listen(
        self,
        name: str,
        port: int | None = None,
        path: str | None = None,
        host: str | None = None,
    ):
        """
        Accept one inbound connection under ``name``, on a TCP port or a
        Unix socket path. Further inbound connections are closed while the
        first one is alive.
        """
        if (port is None) == (path is None):
            raise ValueError("listen() requires exactly one of port or path")

        if name in self._servers:
            raise HarnessConnectionError(name, "already listening")

        self._buffer_for(name)

        async def accept(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
            if (
                existing := self._connections.get(name)
            ) and existing.is_connected():
                writer.close()
                return

            self._register(name, reader, writer)

        if path is not None:
            server = await asyncio.start_unix_server(accept, path=path)

        else:
            server = await asyncio.start_server(
                accept,
                host=host or self._sut_host,
                port=port,
                reuse_address=True,
            )

        self._servers[name] = server

        return server

    async def send_event(
        self,
        name: str,
        message_type: str,
        fields: dict[str, Any],
    ):
        connection = self._connections.get(name)
        if connection is None:
            raise HarnessConnectionError(name, "unknown connection reference")

        await connection.send(message_type, fields)

    async def disconnect(self, name: str):
        connection = self._connections.pop(name, None)
        if connection is None:
            raise HarnessConnectionError(name, "no active connection")

        await connection.close()

    def is_connected(self, node_name: str) -> bool:
        connection = self._connections.get(node_name)
        return connection is not None and connection.is_connected()

    async def wait_for_event(
        self,
        node_name: str,
        kind: str,
        timeout: float,
        fields: dict[str, Any] | None = None,
    ) -> EventPayload:
        buffer = self._buffers.get(node_name)
        if buffer is None:
            raise HarnessConnectionError(node_name, "unknown connection reference")

        try:
            return await buffer.wait_for(kind, timeout, fields=fields)

        except asyncio.TimeoutError:
            raise EventTimeoutError(node_name, kind, timeout) from None

    def has_received(
        self,
        name: str,
        message_type: str,
        fields: dict[str, Any] | None = None,
    ) -> bool:
        buffer = self._buffers.get(name)
        if buffer is None:
            raise HarnessConnectionError(name, "unknown connection reference")

        return buffer.find(EventKind.received(message_type), fields) is not None

    def events(self, name: str) -> tuple[EventPayload, ...]:
        buffer = self._buffers.get(name)
        if buffer is None:
            raise HarnessConnectionError(name, "unknown connection reference")

        return buffer.events

    def clear_buffer(self, name: str):
        buffer = self._buffers.get(name)
        if buffer is None:
            raise HarnessConnectionError(name, "unknown connection reference")

        buffer.clear()

    async def close(self):
        connections = list(self._connections.values())
        self._connections.clear()

        await asyncio.gather(
            *[connection.close() for connection in connections]
        )

        for server in self._servers.values():
            server.close()
            await server.wait_closed()

        self._servers.clear()
