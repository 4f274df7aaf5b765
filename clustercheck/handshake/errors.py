from clustercheck.errors import ClusterCheckError

from .payload import FieldMismatch, HandshakePayload
from .states import HandshakeState


class BaselineVerificationError(ClusterCheckError):
    """
    Raised when the SUT's own CTRL_ACTIVE does not arrive in time or does
    not match the counts of the full topology. Fatal to the scenario.
    """

    def __init__(
        self,
        expected: HandshakePayload,
        actual: HandshakePayload | None = None,
        mismatches: list[FieldMismatch] | None = None,
        reason: str | None = None,
    ):
        self.expected = expected
        self.actual = actual
        self.mismatches = mismatches or []

        if reason is None:
            reason = "; ".join(str(mismatch) for mismatch in self.mismatches)

        self.reason = reason
        super().__init__(f"SUT baseline handshake failed - {reason}")


class HandshakeStateError(ClusterCheckError):
    """Raised on a handshake state transition the state machine does not allow."""

    def __init__(
        self,
        node_name: str,
        from_state: HandshakeState,
        to_state: HandshakeState,
    ):
        self.node_name = node_name
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Node '{node_name}' cannot move from {from_state.value} to {to_state.value}"
        )
