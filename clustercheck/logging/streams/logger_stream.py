import asyncio
import io
import pathlib
import sys
from typing import Callable, Dict, TypeVar

import msgspec

from clustercheck.logging.config.logging_config import LoggingConfig
from clustercheck.logging.config.stream_type import StreamType
from clustercheck.logging.models import Entry, Log

T = TypeVar('T', bound=Entry)


DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {error}"


class LoggerStream:
    """
    Output for one named logger. Entries are rendered through a template to
    stdout/stderr, or appended as msgspec JSON lines when a ``.json`` path
    is set on the stream or passed per call.

    Relative paths resolve against the configured log directory, if any.
    Disk and console writes run in the default executor.
    """

    def __init__(
        self,
        name: str = "default",
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        self.name = name
        self.template = template
        self.path = path

        self._config = LoggingConfig()
        self._files: Dict[str, io.BufferedWriter] = {}
        self._lock = asyncio.Lock()

    @property
    def files(self) -> list[str]:
        return list(self._files)

    async def log(
        self,
        entry: T | Log,
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if isinstance(entry, Log):
            log = entry

        else:
            log = Log.from_frame(entry, sys._getframe(1))

        if self._config.enabled(self.name, log.entry.level) is False:
            return

        if filter and filter(log.entry) is False:
            return

        loop = asyncio.get_running_loop()

        if path := path or self.path:
            logfile_path = self.resolve_path(path)

            async with self._lock:
                await loop.run_in_executor(
                    None,
                    self._append,
                    logfile_path,
                    msgspec.json.encode(log),
                )

            return

        stream = sys.stdout if self._config.output == StreamType.STDOUT else sys.stderr
        await loop.run_in_executor(
            None,
            self._write_line,
            stream,
            self._render(log, template or self.template or DEFAULT_TEMPLATE),
        )

    def resolve_path(self, path: str) -> str:
        logfile = pathlib.Path(path)
        if logfile.suffix != ".json":
            raise ValueError(f"Log file '{path}' must be a .json file")

        if self._config.directory and not logfile.is_absolute():
            logfile = pathlib.Path(self._config.directory) / logfile

        return str(logfile.absolute())

    async def close(self):
        async with self._lock:
            files = list(self._files.values())
            self._files.clear()

            if files:
                await asyncio.get_running_loop().run_in_executor(
                    None,
                    _close_files,
                    files,
                )

    def _render(self, log: Log, template: str) -> str:
        context = {
            "filename": log.filename,
            "function_name": log.function_name,
            "line_number": log.line_number,
            "thread_id": log.thread_id,
            "timestamp": log.timestamp,
        }

        try:
            return log.entry.to_template(template, context=context)

        except (KeyError, IndexError, ValueError) as err:
            context["error"] = f"Invalid log template - {err}"
            return log.entry.to_template(ERROR_TEMPLATE, context=context)

    def _append(self, logfile_path: str, line: bytes):
        logfile = self._files.get(logfile_path)

        if logfile is None or logfile.closed:
            pathlib.Path(logfile_path).parent.mkdir(parents=True, exist_ok=True)
            logfile = open(logfile_path, "ab")
            self._files[logfile_path] = logfile

        logfile.write(line + b"\n")
        logfile.flush()

    def _write_line(self, stream: io.TextIOBase, line: str):
        stream.write(line + "\n")
        stream.flush()


def _close_files(files: list[io.BufferedWriter]):
    for logfile in files:
        if logfile.closed is False:
            logfile.close()
