from .env import (
    Env as Env,
    load_env as load_env,
)
from .errors import ClusterCheckError as ClusterCheckError
from .handshake import (
    BaselineVerificationError as BaselineVerificationError,
    DriverConfig as DriverConfig,
    HandshakeDriver as HandshakeDriver,
    HandshakePayload as HandshakePayload,
    HandshakeState as HandshakeState,
    node_expected_payload as node_expected_payload,
    sut_expected_payload as sut_expected_payload,
)
from .harness import (
    EventKind as EventKind,
    EventPayload as EventPayload,
    EventTimeoutError as EventTimeoutError,
    HarnessConnectionError as HarnessConnectionError,
    MessageType as MessageType,
    TCPHarness as TCPHarness,
)
from .runner import (
    build_topology as build_topology,
    run_verification as run_verification,
)
from .topology import (
    InvalidTopologyError as InvalidTopologyError,
    NodeDescriptor as NodeDescriptor,
    NodeRole as NodeRole,
    NodeSpec as NodeSpec,
    RoleCounts as RoleCounts,
    Topology as Topology,
    UnknownRoleError as UnknownRoleError,
    count_roles as count_roles,
)
from .verification import (
    ReportSummary as ReportSummary,
    VerificationOutcome as VerificationOutcome,
    VerificationReport as VerificationReport,
)
