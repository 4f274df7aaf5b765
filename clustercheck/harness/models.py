import time
from enum import Enum
from typing import Any

import msgspec


class MessageType(str, Enum):
    """Control messages exchanged on a node connection."""
    CTRL_ACTIVE = "CTRL_ACTIVE"


class EventKind(str, Enum):
    CTRL_ACTIVE_SENT = "ctrl_active_sent"
    CTRL_ACTIVE_RECEIVED = "ctrl_active_received"

    @classmethod
    def sent(cls, message_type: str) -> str:
        return _event_kind(message_type, "sent")

    @classmethod
    def received(cls, message_type: str) -> str:
        return _event_kind(message_type, "received")


def _event_kind(message_type: str, direction: str) -> str:
    # Unknown message types are still recorded, under a plain string kind.
    message_type = str(getattr(message_type, "value", message_type))
    return f"{message_type.lower()}_{direction}"


class EventPayload(msgspec.Struct, kw_only=True):
    """
    One event observed on a harness connection: a frame received from the
    other end, or confirmation that a frame was written and drained.
    """
    kind: str
    node_name: str
    message_type: str
    fields: dict[str, Any] = msgspec.field(default_factory=dict)
    received_at: float = msgspec.field(default_factory=time.monotonic)

    def matches(self, expected: dict[str, Any] | None = None) -> bool:
        """
        Every expected field must be present and equal. Values compare as
        strings since scenario tables are text.
        """
        if not expected:
            return True

        for key, value in expected.items():
            if key not in self.fields:
                return False

            if str(self.fields[key]) != str(value):
                return False

        return True
