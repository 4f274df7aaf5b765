from __future__ import annotations
from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictBool, StrictStr, StrictInt

from .time_parser import TimeParser

PrimaryType = Union[str, int, float, bytes, bool]


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Env(BaseModel):
    CLUSTERCHECK_SUT_HOST: StrictStr = "127.0.0.1"
    CLUSTERCHECK_SOURCE_HOST: StrictStr = "0.0.0.0"
    CLUSTERCHECK_CONNECT_TIMEOUT: StrictStr = "5s"
    CLUSTERCHECK_CONNECT_RETRIES: StrictInt = 3
    CLUSTERCHECK_CONNECT_RETRY_INTERVAL: StrictStr = "0.5s"
    CLUSTERCHECK_EVENT_TIMEOUT: StrictStr = "10s"
    CLUSTERCHECK_BASELINE_TIMEOUT: StrictStr = "10s"
    CLUSTERCHECK_SETTLE_DELAY: StrictStr = "1s"
    CLUSTERCHECK_BASELINE_CONNECTION: StrictStr = "ipc"
    CLUSTERCHECK_BASELINE_PORT: StrictInt | None = None
    CLUSTERCHECK_BASELINE_SOCKET: StrictStr | None = None
    CLUSTERCHECK_PARALLEL_VERIFICATION: StrictBool = False
    CLUSTERCHECK_MAX_FRAME_SIZE: StrictInt = 65536
    CLUSTERCHECK_LOG_LEVEL: StrictStr = "info"
    CLUSTERCHECK_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    CLUSTERCHECK_LOG_DIRECTORY: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "CLUSTERCHECK_SUT_HOST": str,
            "CLUSTERCHECK_SOURCE_HOST": str,
            "CLUSTERCHECK_CONNECT_TIMEOUT": str,
            "CLUSTERCHECK_CONNECT_RETRIES": int,
            "CLUSTERCHECK_CONNECT_RETRY_INTERVAL": str,
            "CLUSTERCHECK_EVENT_TIMEOUT": str,
            "CLUSTERCHECK_BASELINE_TIMEOUT": str,
            "CLUSTERCHECK_SETTLE_DELAY": str,
            "CLUSTERCHECK_BASELINE_CONNECTION": str,
            "CLUSTERCHECK_BASELINE_PORT": int,
            "CLUSTERCHECK_BASELINE_SOCKET": str,
            "CLUSTERCHECK_PARALLEL_VERIFICATION": _parse_bool,
            "CLUSTERCHECK_MAX_FRAME_SIZE": int,
            "CLUSTERCHECK_LOG_LEVEL": str,
            "CLUSTERCHECK_LOG_OUTPUT": str,
            "CLUSTERCHECK_LOG_DIRECTORY": str,
        }

    def get_driver_config(self) -> dict:
        """Get handshake driver timing and baseline settings, durations in seconds."""
        parser = TimeParser()

        return {
            'event_timeout': parser.parse(self.CLUSTERCHECK_EVENT_TIMEOUT),
            'baseline_timeout': parser.parse(self.CLUSTERCHECK_BASELINE_TIMEOUT),
            'settle_delay': parser.parse(self.CLUSTERCHECK_SETTLE_DELAY),
            'baseline_connection': self.CLUSTERCHECK_BASELINE_CONNECTION,
            'parallel': self.CLUSTERCHECK_PARALLEL_VERIFICATION,
        }

    def get_harness_config(self) -> dict:
        """Get TCP harness connection settings, durations in seconds."""
        parser = TimeParser()

        return {
            'sut_host': self.CLUSTERCHECK_SUT_HOST,
            'source_host': self.CLUSTERCHECK_SOURCE_HOST,
            'connect_timeout': parser.parse(self.CLUSTERCHECK_CONNECT_TIMEOUT),
            'connect_retries': self.CLUSTERCHECK_CONNECT_RETRIES,
            'retry_interval': parser.parse(self.CLUSTERCHECK_CONNECT_RETRY_INTERVAL),
            'max_frame_size': self.CLUSTERCHECK_MAX_FRAME_SIZE,
        }

    def get_logging_config(self) -> dict:
        return {
            'log_level': self.CLUSTERCHECK_LOG_LEVEL,
            'log_output': self.CLUSTERCHECK_LOG_OUTPUT,
            'log_directory': self.CLUSTERCHECK_LOG_DIRECTORY,
        }

    def get_baseline_listen_config(self) -> dict | None:
        """Where an owned harness should accept the SUT's baseline connection, if anywhere."""
        if self.CLUSTERCHECK_BASELINE_SOCKET:
            return {'path': self.CLUSTERCHECK_BASELINE_SOCKET}

        if self.CLUSTERCHECK_BASELINE_PORT is not None:
            return {'port': self.CLUSTERCHECK_BASELINE_PORT}

        return None
