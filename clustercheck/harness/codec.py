"""
Length-prefixed event framing.

    +-------------------+----------------------------------------+
    | length (4B, BE)   | MESSAGE_TYPE <|/| orjson object         |
    +-------------------+----------------------------------------+
"""

from __future__ import annotations

import struct
from typing import Any, Iterator

import orjson

from .errors import FrameDecodeError, FrameTooLargeError


HEADER = struct.Struct(">I")
SEPARATOR = b"<|/|"
DEFAULT_MAX_FRAME_SIZE = 64 * 1024


def frame_event(
    message_type: str,
    fields: dict[str, Any],
    max_frame_size: int = DEFAULT_MAX_FRAME_SIZE,
) -> bytes:
    message_type = str(getattr(message_type, "value", message_type))
    body = message_type.encode() + SEPARATOR + orjson.dumps(fields)

    if len(body) > max_frame_size:
        raise FrameTooLargeError(len(body), max_frame_size)

    return HEADER.pack(len(body)) + body


def decode_body(body: bytes | bytearray) -> tuple[str, dict[str, Any]]:
    message_type, separator, payload = bytes(body).partition(SEPARATOR)
    if not separator or not message_type:
        raise FrameDecodeError("Frame is missing a message type")

    try:
        fields = orjson.loads(payload)

    except orjson.JSONDecodeError as err:
        raise FrameDecodeError(f"Frame body is not valid JSON - {err}")

    if not isinstance(fields, dict):
        raise FrameDecodeError("Frame body must be a JSON object")

    try:
        return message_type.decode(), fields

    except UnicodeDecodeError as err:
        raise FrameDecodeError(f"Message type is not valid UTF-8 - {err}")


class FrameReader:
    """Accumulates stream bytes and yields complete frames."""

    def __init__(self, max_frame_size: int = DEFAULT_MAX_FRAME_SIZE) -> None:
        self.buffer = bytearray()
        self._max_frame_size = max_frame_size

    def __len__(self) -> int:
        return len(self.buffer)

    def feed(self, data: bytes) -> Iterator[tuple[str, dict[str, Any]]]:
        """
        Buffer ``data`` and return an iterator over the complete frames.
        An invalid frame raises only after every frame ahead of it has
        been yielded.
        """
        self.buffer += data
        return self._drain()

    def _drain(self) -> Iterator[tuple[str, dict[str, Any]]]:
        while (frame := self.maybe_extract_next()) is not None:
            yield decode_body(frame)

    def maybe_extract_next(self) -> bytearray | None:
        if len(self.buffer) < HEADER.size:
            return None

        (length,) = HEADER.unpack_from(self.buffer)
        if length > self._max_frame_size:
            raise FrameTooLargeError(length, self._max_frame_size)

        end = HEADER.size + length
        if len(self.buffer) < end:
            return None

        out = self.buffer[HEADER.size:end]
        del self.buffer[:end]

        return out

    def clear(self):
        self.buffer.clear()
