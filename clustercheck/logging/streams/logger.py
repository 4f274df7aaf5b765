from __future__ import annotations

import asyncio
import sys
from typing import Callable, Dict, TypeVar

from clustercheck.logging.models import Entry, Log

from .logger_context import LoggerContext
from .logger_stream import LoggerStream

T = TypeVar('T', bound=Entry)


class Logger:
    """
    Named logger streams. Entries go to the ``default`` stream unless a
    name is given.

    Example usage:
        logger = Logger()
        logger.configure(path="clustercheck.json")
        await logger.log(ReportInfo(message="done", total=3, passed=3, failed=0))
    """

    def __init__(self) -> None:
        self._streams: Dict[str, LoggerStream] = {}

    def __getitem__(self, name: str) -> LoggerStream:
        if (stream := self._streams.get(name)) is None:
            stream = LoggerStream(name=name)
            self._streams[name] = stream

        return stream

    def configure(
        self,
        name: str = 'default',
        template: str | None = None,
        path: str | None = None,
    ) -> LoggerStream:
        stream = self[name]
        stream.template = template
        stream.path = path

        return stream

    def context(
        self,
        name: str = 'default',
        template: str | None = None,
        path: str | None = None,
    ) -> LoggerContext:
        stream = self[name]

        if template:
            stream.template = template

        if path:
            stream.path = path

        return LoggerContext(stream)

    async def log(
        self,
        entry: T,
        name: str = 'default',
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        await self[name].log(
            Log.from_frame(entry, sys._getframe(1)),
            template=template,
            path=path,
            filter=filter,
        )

    async def close(self):
        await asyncio.gather(
            *[stream.close() for stream in self._streams.values()]
        )
