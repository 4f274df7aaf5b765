from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clustercheck.handshake.payload import FieldMismatch, HandshakePayload
    from clustercheck.handshake.states import HandshakeState
    from clustercheck.topology.models import NodeDescriptor


@dataclass(slots=True, frozen=True)
class VerificationOutcome:
    """
    Result of verifying one node's handshake.

    ``actual`` is None when no handshake was observed, e.g. the connection
    was refused or the wait timed out. ``stage`` is the state the node had
    reached when verification concluded.
    """
    node: NodeDescriptor
    expected: HandshakePayload
    actual: HandshakePayload | None
    matched: bool
    state: HandshakeState
    stage: HandshakeState
    mismatches: tuple[FieldMismatch, ...] = ()
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.matched is False

    def describe(self) -> str:
        prefix = f"Node '{self.node.name}' ({self.node.role.value})"

        if self.matched:
            return f"{prefix} verified: {self.expected}"

        details: list[str] = []
        if self.mismatches:
            details.append(
                "; ".join(str(mismatch) for mismatch in self.mismatches)
            )

        if self.error:
            details.append(self.error)

        return f"{prefix} failed while {self.stage.value}: {' - '.join(details)}"


@dataclass(slots=True, frozen=True)
class ReportSummary:
    total: int
    passed: int
    failed: int
