from .codec import (
    FrameReader as FrameReader,
    decode_body as decode_body,
    frame_event as frame_event,
)
from .errors import (
    EventTimeoutError as EventTimeoutError,
    FrameDecodeError as FrameDecodeError,
    FrameTooLargeError as FrameTooLargeError,
    HarnessConnectionError as HarnessConnectionError,
)
from .event_buffer import EventBuffer as EventBuffer
from .models import (
    EventKind as EventKind,
    EventPayload as EventPayload,
    MessageType as MessageType,
)
from .protocols import (
    ConnectionHandle as ConnectionHandle,
    ConnectionProvider as ConnectionProvider,
    EventSource as EventSource,
    StatusQuery as StatusQuery,
)
from .tcp_harness import (
    HarnessConnection as HarnessConnection,
    TCPHarness as TCPHarness,
)
