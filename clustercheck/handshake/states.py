"""
Handshake State Machine - per node verification states.

Progression: IDLE -> CONNECTING -> AWAITING_SENT -> AWAITING_RECEIVED -> VERIFIED
Any non-terminal state may fail. VERIFIED and FAILED are terminal.
"""

from enum import Enum


class HandshakeState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    AWAITING_SENT = "awaiting_sent"
    AWAITING_RECEIVED = "awaiting_received"
    VERIFIED = "verified"
    FAILED = "failed"


class HandshakeStateMachine:

    VALID_TRANSITIONS: dict[HandshakeState, set[HandshakeState]] = {
        HandshakeState.IDLE: {HandshakeState.CONNECTING, HandshakeState.FAILED},
        HandshakeState.CONNECTING: {HandshakeState.AWAITING_SENT, HandshakeState.FAILED},
        HandshakeState.AWAITING_SENT: {HandshakeState.AWAITING_RECEIVED, HandshakeState.FAILED},
        HandshakeState.AWAITING_RECEIVED: {HandshakeState.VERIFIED, HandshakeState.FAILED},
        HandshakeState.VERIFIED: set(),  # Terminal
        HandshakeState.FAILED: set(),  # Terminal
    }

    @classmethod
    def can_transition(cls, from_state: HandshakeState, to_state: HandshakeState) -> bool:
        if from_state == to_state:
            return False
        return to_state in cls.VALID_TRANSITIONS.get(from_state, set())

