import contextvars
from typing import Literal

import msgspec

from clustercheck.logging.models import LogLevel, LogLevelName

from .stream_type import StreamType


LogOutput = Literal['stdout', 'stderr']


class LoggingSettings(msgspec.Struct, frozen=True):
    level: LogLevel = LogLevel.INFO
    output: StreamType = StreamType.STDERR
    directory: str | None = None
    disabled: frozenset[str] = frozenset()


_settings: contextvars.ContextVar[LoggingSettings] = contextvars.ContextVar(
    "clustercheck_logging_settings",
    default=LoggingSettings(),
)


class LoggingConfig:
    """
    Logging settings held in a context variable, so a change made inside an
    asyncio task only applies to that task and the tasks it starts.
    """

    @property
    def settings(self) -> LoggingSettings:
        return _settings.get()

    @property
    def level(self) -> LogLevel:
        return _settings.get().level

    @property
    def output(self) -> StreamType:
        return _settings.get().output

    @property
    def directory(self) -> str | None:
        return _settings.get().directory

    def update(
        self,
        log_directory: str | None = None,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ):
        changes = {}

        if log_directory:
            changes["directory"] = log_directory

        if log_level:
            changes["level"] = LogLevel.to_level(log_level)

        if log_output:
            changes["output"] = StreamType(log_output)

        if changes:
            _settings.set(msgspec.structs.replace(_settings.get(), **changes))

    def reset(self):
        _settings.set(LoggingSettings())

    def disable(self, *logger_names: str):
        current = _settings.get()
        _settings.set(
            msgspec.structs.replace(
                current,
                disabled=current.disabled | frozenset(logger_names),
            )
        )

    def enable(self, *logger_names: str):
        current = _settings.get()
        _settings.set(
            msgspec.structs.replace(
                current,
                disabled=current.disabled - frozenset(logger_names),
            )
        )

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        current = _settings.get()
        return (
            logger_name not in current.disabled
            and log_level.rank >= current.level.rank
        )
