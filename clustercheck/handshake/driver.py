
"""
Handshake Driver - connects each simulated node to the SUT, sends its
CTRL_ACTIVE, checks the counts that went on the wire and waits for the
SUT's own CTRL_ACTIVE in answer.

Before any node is verified the SUT's own CTRL_ACTIVE, announced on the
baseline connection, must match the counts of the whole topology. Every
wait is bounded; a connection failure or timeout fails only the node it
happened on, while a baseline failure aborts the run.
"""

import asyncio
from dataclasses import dataclass

from clustercheck.harness.models import EventKind, EventPayload, MessageType
from clustercheck.harness.protocols import (
    ConnectionProvider,
    EventSource,
    StatusQuery,
)
from clustercheck.logging import Logger
from clustercheck.logging.clustercheck_logging_models import (
    BaselineError,
    BaselineInfo,
    HandshakeDebug,
    HandshakeError,
    HandshakeInfo,
    ReportError,
    ReportInfo,
)
from clustercheck.topology.models import NodeDescriptor, RoleCounts, Topology
from clustercheck.topology.role_counter import count_roles
from clustercheck.verification.outcome import VerificationOutcome
from clustercheck.verification.report import VerificationReport

from .errors import BaselineVerificationError, HandshakeStateError
from .expectations import node_expected_payload, sut_expected_payload
from .payload import FieldMismatch, HandshakePayload
from .states import HandshakeState, HandshakeStateMachine


@dataclass(slots=True)
class DriverConfig:
    """Timing and baseline settings for a HandshakeDriver, in seconds."""

    event_timeout: float = 10.0
    baseline_timeout: float = 10.0
    settle_delay: float = 1.0
    baseline_connection: str = "ipc"
    parallel: bool = False
    verify_baseline: bool = True


class HandshakeDriver:
    def __init__(
        self,
        connections: ConnectionProvider,
        events: EventSource,
        status: StatusQuery,
        config: DriverConfig | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._connections = connections
        self._events = events
        self._status = status
        self._config = config or DriverConfig()
        self._logger = logger or Logger()
        self._states: dict[str, HandshakeState] = {}

    @property
    def config(self) -> DriverConfig:
        return self._config

    def state_of(self, node_name: str) -> HandshakeState | None:
        return self._states.get(node_name)

    async def run(
        self,
        topology: Topology,
        report: VerificationReport | None = None,
    ) -> VerificationReport:
        if report is None:
            report = VerificationReport()

        counts = count_roles(topology)

        if self._config.verify_baseline:
            await self.verify_baseline(topology, counts)

        if self._config.parallel:
            outcomes = await asyncio.gather(
                *[
                    self.verify_node(topology, node, counts)
                    for node in topology.nodes
                ],
                return_exceptions=True,
            )

            # Recorded in topology order once every node has settled.
            errors: list[BaseException] = []
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    errors.append(outcome)

                else:
                    report.record(outcome)

            if errors:
                raise errors[0]

        else:
            for node in topology.nodes:
                report.record(await self.verify_node(topology, node, counts))

        summary = report.summary()
        if summary.failed > 0:
            await self._logger.log(
                ReportError(
                    message=report.format_failure(),
                    total=summary.total,
                    passed=summary.passed,
                    failed=summary.failed,
                )
            )

        else:
            await self._logger.log(
                ReportInfo(
                    message="All node handshakes verified",
                    total=summary.total,
                    passed=summary.passed,
                    failed=summary.failed,
                )
            )

        return report

    async def verify_baseline(
        self,
        topology: Topology,
        counts: RoleCounts | None = None,
    ) -> HandshakePayload:
        """
        Wait for the SUT's own CTRL_ACTIVE and check it against the full
        topology. Raises BaselineVerificationError on timeout or mismatch.
        """
        if counts is None:
            counts = count_roles(topology)

        expected = sut_expected_payload(counts)
        connection = self._config.baseline_connection

        if self._config.settle_delay > 0:
            await asyncio.sleep(self._config.settle_delay)

        try:
            event = await self._events.wait_for_event(
                connection,
                EventKind.CTRL_ACTIVE_RECEIVED,
                self._config.baseline_timeout,
            )

        except (asyncio.TimeoutError, TimeoutError, ConnectionError) as err:
            await self._logger.log(
                BaselineError(
                    message=f"No SUT CTRL_ACTIVE - {err}",
                    connection=connection,
                    sut_port=topology.sut_port,
                )
            )

            raise BaselineVerificationError(
                expected,
                reason=f"no CTRL_ACTIVE from SUT on '{connection}' - {err}",
            )

        actual = self._payload_from_event(event)
        if actual is None:
            raise BaselineVerificationError(
                expected,
                reason=f"SUT CTRL_ACTIVE is missing count fields: {event.fields}",
            )

        if mismatches := expected.compare(actual):
            error = BaselineVerificationError(
                expected,
                actual=actual,
                mismatches=mismatches,
            )

            await self._logger.log(
                BaselineError(
                    message=str(error),
                    connection=connection,
                    sut_port=topology.sut_port,
                )
            )

            raise error

        await self._logger.log(
            BaselineInfo(
                message=f"SUT baseline verified: {actual}",
                connection=connection,
                sut_port=topology.sut_port,
            )
        )

        return actual

    async def verify_node(
        self,
        topology: Topology,
        node: NodeDescriptor,
        counts: RoleCounts | None = None,
    ) -> VerificationOutcome:
        if counts is None:
            counts = count_roles(topology)

        expected = node_expected_payload(node.role, counts)
        local_port = node.local_port(topology.sut_port)
        timeout = self._config.event_timeout

        self._states[node.name] = HandshakeState.IDLE

        try:
            self._advance(node, HandshakeState.CONNECTING)
            handle = await self._connections.connect(
                node.name,
                local_port,
                topology.sut_port,
            )

            self._advance(node, HandshakeState.AWAITING_SENT)
            await self._log_debug(topology, node, f"Sending CTRL_ACTIVE: {expected}")

            await asyncio.wait_for(
                handle.send(
                    MessageType.CTRL_ACTIVE,
                    {
                        "role": node.role.value,
                        **expected.to_fields(),
                    },
                ),
                timeout=timeout,
            )

            sent = await self._events.wait_for_event(
                node.name,
                EventKind.CTRL_ACTIVE_SENT,
                timeout,
            )

            self._advance(node, HandshakeState.AWAITING_RECEIVED)

            # The SUT answers with its own view of the cluster, so only
            # its arrival is checked. The counts under test are the ones
            # the SUT received.
            reply = await self._events.wait_for_event(
                node.name,
                EventKind.CTRL_ACTIVE_RECEIVED,
                timeout,
            )

        except ConnectionError as err:
            return await self._fail(
                topology,
                node,
                expected,
                error=f"Connection failed - {err}",
            )

        except (asyncio.TimeoutError, TimeoutError) as err:
            return await self._fail(
                topology,
                node,
                expected,
                error=f"Timed out - {str(err) or f'no response within {timeout}s'}",
            )

        actual = self._payload_from_event(sent)
        if actual is None:
            return await self._fail(
                topology,
                node,
                expected,
                error=f"CTRL_ACTIVE was sent without count fields: {sent.fields}",
            )

        if mismatches := expected.compare(actual):
            return await self._fail(
                topology,
                node,
                expected,
                actual=actual,
                mismatches=mismatches,
            )

        if not self._status.is_connected(node.name):
            return await self._fail(
                topology,
                node,
                expected,
                actual=actual,
                error="Not connected to SUT after handshake",
            )

        self._advance(node, HandshakeState.VERIFIED)

        await self._logger.log(
            HandshakeInfo(
                message=f"Handshake verified: {actual}, SUT answered {reply.fields}",
                node_name=node.name,
                role=node.role.value,
                local_port=local_port,
                sut_port=topology.sut_port,
            )
        )

        return VerificationOutcome(
            node=node,
            expected=expected,
            actual=actual,
            matched=True,
            state=HandshakeState.VERIFIED,
            stage=HandshakeState.AWAITING_RECEIVED,
        )

    async def _fail(
        self,
        topology: Topology,
        node: NodeDescriptor,
        expected: HandshakePayload,
        actual: HandshakePayload | None = None,
        mismatches: list[FieldMismatch] | None = None,
        error: str | None = None,
    ) -> VerificationOutcome:
        stage = self._states.get(node.name, HandshakeState.IDLE)
        self._advance(node, HandshakeState.FAILED)

        outcome = VerificationOutcome(
            node=node,
            expected=expected,
            actual=actual,
            matched=False,
            state=HandshakeState.FAILED,
            stage=stage,
            mismatches=tuple(mismatches or ()),
            error=error,
        )

        await self._logger.log(
            HandshakeError(
                message=outcome.describe(),
                node_name=node.name,
                role=node.role.value,
                local_port=node.local_port(topology.sut_port),
                sut_port=topology.sut_port,
            )
        )

        return outcome

    def _advance(self, node: NodeDescriptor, to_state: HandshakeState):
        from_state = self._states.get(node.name, HandshakeState.IDLE)

        if not HandshakeStateMachine.can_transition(from_state, to_state):
            raise HandshakeStateError(node.name, from_state, to_state)

        self._states[node.name] = to_state

    def _payload_from_event(self, event: EventPayload) -> HandshakePayload | None:
        try:
            return HandshakePayload.from_fields(event.fields)

        except ValueError:
            return None

    async def _log_debug(
        self,
        topology: Topology,
        node: NodeDescriptor,
        message: str,
    ):
        await self._logger.log(
            HandshakeDebug(
                message=message,
                node_name=node.name,
                role=node.role.value,
                local_port=node.local_port(topology.sut_port),
                sut_port=topology.sut_port,
            )
        )
