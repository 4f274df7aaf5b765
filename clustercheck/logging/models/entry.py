from typing import Any, Dict

import msgspec

from .log_level import LogLevel


class Entry(msgspec.Struct, kw_only=True):
    """
    Base log entry. Subclasses add their own fields and set a default
    ``level``.
    """
    message: str | None = None
    tags: set[str] = msgspec.field(default_factory=set)
    level: LogLevel

    def to_template(
        self,
        template: str,
        context: Dict[str, Any] | None = None,
    ) -> str:
        values = msgspec.structs.asdict(self)
        values["level"] = self.level.value
        values.update(context or {})

        return template.format(**values)
