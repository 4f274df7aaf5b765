from .payload import (
    FieldMismatch as FieldMismatch,
    HandshakePayload as HandshakePayload,
)
from .states import (
    HandshakeState as HandshakeState,
    HandshakeStateMachine as HandshakeStateMachine,
)
from .errors import (
    BaselineVerificationError as BaselineVerificationError,
    HandshakeStateError as HandshakeStateError,
)
from .expectations import (
    node_expected_payload as node_expected_payload,
    sut_expected_payload as sut_expected_payload,
)
from .driver import (
    DriverConfig as DriverConfig,
    HandshakeDriver as HandshakeDriver,
)
