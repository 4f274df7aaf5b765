import socket
from dataclasses import dataclass, field
from typing import Any

import pytest

from clustercheck import (
    BaselineVerificationError,
    Env,
    Topology,
    build_topology,
    run_verification,
)
from clustercheck.harness import EventPayload

from tests.unit.handshake.mocks import (
    MockConnectionProvider,
    MockEventSource,
    MockStatusQuery,
)


MIXED_BASELINE = {
    "configured_peers": 2,
    "configured_pollers": 1,
    "configured_masters": 0,
}


@dataclass
class MockHarness:
    """Connection provider, event source and status query in one object."""

    events: MockEventSource = field(default_factory=MockEventSource)
    status: MockStatusQuery = field(default_factory=MockStatusQuery)
    connections: MockConnectionProvider | None = None

    def __post_init__(self):
        if self.connections is None:
            self.connections = MockConnectionProvider(events=self.events)

    async def connect(self, node_name: str, local_port: int, remote_port: int):
        return await self.connections.connect(node_name, local_port, remote_port)

    async def wait_for_event(
        self,
        node_name: str,
        kind: str,
        timeout: float,
        fields: dict[str, Any] | None = None,
    ) -> EventPayload:
        return await self.events.wait_for_event(node_name, kind, timeout, fields=fields)

    def is_connected(self, node_name: str) -> bool:
        return self.status.is_connected(node_name)


def create_env(**values) -> Env:
    values.setdefault("CLUSTERCHECK_SETTLE_DELAY", "0s")
    values.setdefault("CLUSTERCHECK_EVENT_TIMEOUT", "0.5s")
    values.setdefault("CLUSTERCHECK_BASELINE_TIMEOUT", "0.5s")
    values.setdefault("CLUSTERCHECK_LOG_LEVEL", "critical")

    return Env(**values)


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


class TestRunVerification:
    """Tests for the top level verification entry point."""

    @pytest.mark.asyncio
    async def test_all_nodes_pass(self, mixed_topology: Topology):
        """Every node passes when its expected counts reach the SUT."""
        harness = MockHarness(events=MockEventSource(baseline=MIXED_BASELINE))

        report = await run_verification(
            mixed_topology,
            harness=harness,
            env=create_env(),
        )

        assert report.all_passed
        assert report.summary().total == 3

    @pytest.mark.asyncio
    async def test_failure_reported(self, mixed_topology: Topology):
        """A mismatched node is the report's first failure."""
        events = MockEventSource(baseline=MIXED_BASELINE)
        harness = MockHarness(
            events=events,
            connections=MockConnectionProvider(
                events=events,
                rewrites={"peer2": {"configured_pollers": 2}},
            ),
        )

        report = await run_verification(
            mixed_topology,
            harness=harness,
            env=create_env(),
        )

        assert report.first_failure().node.name == "peer2"
        assert report.first_failure().mismatches[0].field == "configured_pollers"

    @pytest.mark.asyncio
    async def test_baseline_failure_raises(self, mixed_topology: Topology):
        """A bad baseline aborts the run."""
        harness = MockHarness(events=MockEventSource(baseline=None))

        with pytest.raises(BaselineVerificationError):
            await run_verification(
                mixed_topology,
                harness=harness,
                env=create_env(),
            )

    @pytest.mark.asyncio
    async def test_parallel_override(self, mixed_topology: Topology):
        """The parallel argument overrides the env setting."""
        harness = MockHarness(events=MockEventSource(baseline=MIXED_BASELINE))

        report = await run_verification(
            mixed_topology,
            harness=harness,
            env=create_env(CLUSTERCHECK_PARALLEL_VERIFICATION=False),
            parallel=True,
        )

        assert [outcome.node.name for outcome in report] == mixed_topology.names

    @pytest.mark.asyncio
    async def test_custom_baseline_connection(self, mixed_topology: Topology):
        """The baseline connection name comes from the env."""
        events = MockEventSource(
            baseline=MIXED_BASELINE,
            baseline_connection="control",
        )

        report = await run_verification(
            mixed_topology,
            harness=MockHarness(events=events),
            env=create_env(CLUSTERCHECK_BASELINE_CONNECTION="control"),
        )

        assert report.all_passed
        assert events.waits[0][0] == "control"

    @pytest.mark.asyncio
    async def test_skip_baseline(self, mixed_topology: Topology):
        """verify_baseline=False goes straight to the nodes."""
        events = MockEventSource()

        report = await run_verification(
            mixed_topology,
            harness=MockHarness(events=events),
            env=create_env(),
            verify_baseline=False,
        )

        assert report.all_passed
        assert all(name != "ipc" for name, _ in events.waits)

    @pytest.mark.asyncio
    async def test_owned_harness_is_closed(self):
        """Without a harness one is built from the env and torn down."""
        port = free_port()

        report = await run_verification(
            build_topology([], 7000),
            env=create_env(CLUSTERCHECK_BASELINE_PORT=port),
            verify_baseline=False,
        )

        assert len(report) == 0

        # The baseline listener is gone once the run returns.
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
            probe.bind(("127.0.0.1", port))
