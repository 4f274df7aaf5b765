from .models import Entry, LogLevel


class HandshakeDebug(Entry, kw_only=True):
    node_name: str
    role: str
    local_port: int
    sut_port: int
    level: LogLevel = LogLevel.DEBUG

class HandshakeInfo(Entry, kw_only=True):
    node_name: str
    role: str
    local_port: int
    sut_port: int
    level: LogLevel = LogLevel.INFO

class HandshakeError(Entry, kw_only=True):
    node_name: str
    role: str
    local_port: int
    sut_port: int
    level: LogLevel = LogLevel.ERROR

class BaselineInfo(Entry, kw_only=True):
    connection: str
    sut_port: int
    level: LogLevel = LogLevel.INFO

class BaselineError(Entry, kw_only=True):
    connection: str
    sut_port: int
    level: LogLevel = LogLevel.ERROR

class ConnectionDebug(Entry, kw_only=True):
    connection: str
    host: str
    port: int
    level: LogLevel = LogLevel.DEBUG

class ConnectionWarning(Entry, kw_only=True):
    connection: str
    host: str
    port: int
    level: LogLevel = LogLevel.WARN

class ConnectionFailure(Entry, kw_only=True):
    connection: str
    host: str
    port: int
    level: LogLevel = LogLevel.ERROR

class ReportInfo(Entry, kw_only=True):
    total: int
    passed: int
    failed: int
    level: LogLevel = LogLevel.INFO

class ReportError(Entry, kw_only=True):
    total: int
    passed: int
    failed: int
    level: LogLevel = LogLevel.ERROR
