from clustercheck.errors import ClusterCheckError


class HarnessConnectionError(ClusterCheckError, ConnectionError):
    """Raised when a harness connection cannot be opened or is unknown."""

    def __init__(self, connection: str, message: str):
        self.connection = connection
        super().__init__(f"Connection '{connection}': {message}")


class EventTimeoutError(ClusterCheckError, TimeoutError):
    """Raised when no matching event arrives before the wait times out."""

    def __init__(self, connection: str, kind: str, timeout: float):
        self.connection = connection
        self.kind = str(getattr(kind, "value", kind))
        self.timeout = timeout
        super().__init__(
            f"Connection '{connection}': no {self.kind} event within {timeout}s"
        )


class FrameTooLargeError(ClusterCheckError):
    """Raised when a frame header declares more bytes than allowed."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"Frame of {length} bytes exceeds maximum of {max_length} bytes"
        )


class FrameDecodeError(ClusterCheckError):
    """Raised when a frame body is not a valid event."""
    pass
