from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

import msgspec


@dataclass(slots=True, frozen=True)
class FieldMismatch:
    """One count field whose observed value differs from the expectation."""
    field: str
    expected: int
    actual: int | None

    def __str__(self) -> str:
        return f"{self.field} expected {self.expected}, got {self.actual}"


class HandshakePayload(msgspec.Struct, frozen=True, kw_only=True):
    """
    Membership counts carried by a CTRL_ACTIVE handshake.

    Field names match the columns of existing scenario tables and must
    not change.
    """
    configured_peers: int
    configured_pollers: int
    configured_masters: int

    FIELDS: ClassVar[tuple[str, ...]] = (
        "configured_peers",
        "configured_pollers",
        "configured_masters",
    )

    def to_fields(self) -> dict[str, int]:
        return {field: getattr(self, field) for field in self.FIELDS}

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> HandshakePayload:
        """
        Build a payload from a field mapping, accepting the string values
        scenario tables carry. Missing or non-numeric fields raise ValueError.
        """
        values: dict[str, int] = {}
        for field in cls.FIELDS:
            value = fields.get(field)
            if value is None:
                raise ValueError(f"Handshake is missing field '{field}'")

            try:
                values[field] = int(value)

            except (TypeError, ValueError):
                raise ValueError(
                    f"Handshake field '{field}' is not an integer: {value!r}"
                )

        return cls(**values)

    def compare(self, actual: HandshakePayload) -> list[FieldMismatch]:
        return [
            FieldMismatch(
                field=field,
                expected=getattr(self, field),
                actual=getattr(actual, field),
            )
            for field in self.FIELDS
            if getattr(self, field) != getattr(actual, field)
        ]

    def __str__(self) -> str:
        return ", ".join(
            f"{field}={value}" for field, value in self.to_fields().items()
        )
