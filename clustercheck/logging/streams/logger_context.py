from .logger_stream import LoggerStream


class LoggerContext:
    """Async context manager handing out a stream and closing its files on exit."""

    def __init__(self, stream: LoggerStream) -> None:
        self.stream = stream

    async def __aenter__(self) -> LoggerStream:
        return self.stream

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stream.close()
