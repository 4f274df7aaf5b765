"""
In-process stand-in for the monitoring process under test.

It listens on the SUT port and answers each node's CTRL_ACTIVE with its
own view of the cluster (or with chosen counts, or not at all), the way
the real daemon does. It can also announce its own CTRL_ACTIVE on the
harness's baseline listener.
"""

import asyncio
from typing import Any

from clustercheck.harness import FrameReader, MessageType, frame_event


class FakeSUT:
    def __init__(
        self,
        sut_port: int,
        counts: dict[str, Any] | None = None,
        replies: dict[int, dict[str, Any]] | None = None,
        silent_ports: set[int] | None = None,
    ) -> None:
        self.sut_port = sut_port
        self.counts = counts or {
            "configured_peers": 0,
            "configured_pollers": 0,
            "configured_masters": 0,
        }
        self.replies = replies or {}
        self.silent_ports = silent_ports or set()
        self.received: list[tuple[int, str, dict[str, Any]]] = []
        self._server: asyncio.AbstractServer | None = None
        self._writers: list[asyncio.StreamWriter] = []

    async def start(self):
        self._server = await asyncio.start_server(
            self._handle,
            host="127.0.0.1",
            port=self.sut_port,
            reuse_address=True,
        )

    async def announce_baseline(self, port: int):
        _, writer = await asyncio.open_connection("127.0.0.1", port)
        self._writers.append(writer)

        writer.write(frame_event(MessageType.CTRL_ACTIVE, self.counts))
        await writer.drain()

    async def close(self):
        for writer in self._writers:
            writer.close()

        if self._server:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self._writers.append(writer)
        source_port = writer.get_extra_info("peername")[1]
        frames = FrameReader()

        try:
            while data := await reader.read(4096):
                for message_type, fields in frames.feed(data):
                    self.received.append((source_port, message_type, fields))

                    if message_type != MessageType.CTRL_ACTIVE.value:
                        continue

                    if source_port in self.silent_ports:
                        continue

                    reply = self.replies.get(source_port, self.counts)
                    writer.write(frame_event(MessageType.CTRL_ACTIVE, reply))
                    await writer.drain()

        except (ConnectionError, OSError):
            pass

        finally:
            writer.close()
