"""
Tests for expected CTRL_ACTIVE payloads per role.

The poller formula assumes a single poller group and masters always
report zero counts; both are asserted as they currently behave.
"""

import pytest

from clustercheck.handshake import (
    HandshakePayload,
    node_expected_payload,
    sut_expected_payload,
)
from clustercheck.topology import (
    NodeRole,
    RoleCounts,
    UnknownRoleError,
    build_topology,
    count_roles,
)


COUNTS = [
    RoleCounts(peers=0, pollers=0, masters=0),
    RoleCounts(peers=2, pollers=1, masters=0),
    RoleCounts(peers=0, pollers=0, masters=1),
    RoleCounts(peers=3, pollers=4, masters=2),
    RoleCounts(peers=1, pollers=0, masters=5),
]


def payload(peers: int, pollers: int, masters: int) -> HandshakePayload:
    return HandshakePayload(
        configured_peers=peers,
        configured_pollers=pollers,
        configured_masters=masters,
    )


# =============================================================================
# Role formulas
# =============================================================================


class TestSutExpectedPayload:
    """Tests for the SUT's own baseline payload."""

    @pytest.mark.parametrize("counts", COUNTS)
    def test_equals_raw_counts(self, counts: RoleCounts):
        """The SUT reports the role counts unchanged."""
        assert sut_expected_payload(counts) == payload(
            counts.peers,
            counts.pollers,
            counts.masters,
        )

    def test_empty_topology(self):
        """An empty topology yields all zeros."""
        assert sut_expected_payload(RoleCounts()) == payload(0, 0, 0)


class TestNodeExpectedPayload:
    """Tests for per role node payloads."""

    @pytest.mark.parametrize("counts", COUNTS)
    def test_peer_sees_raw_counts(self, counts: RoleCounts):
        """A peer sees the cluster exactly as the SUT does."""
        assert node_expected_payload(NodeRole.PEER, counts) == sut_expected_payload(counts)

    @pytest.mark.parametrize("counts", [counts for counts in COUNTS if counts.pollers > 0])
    def test_poller_formula(self, counts: RoleCounts):
        """Pollers see sibling pollers as peers and the SUT plus peers as masters."""
        expected = node_expected_payload(NodeRole.POLLER, counts)

        assert expected.configured_peers == counts.pollers - 1
        assert expected.configured_pollers == 0
        assert expected.configured_masters == counts.peers + 1

    @pytest.mark.parametrize("counts", COUNTS)
    def test_master_reports_zero(self, counts: RoleCounts):
        """Masters report zero counts whatever the topology."""
        assert node_expected_payload(NodeRole.MASTER, counts) == payload(0, 0, 0)

    def test_role_strings_accepted(self):
        """Role names resolve the same as NodeRole members."""
        counts = RoleCounts(peers=2, pollers=1, masters=0)

        assert node_expected_payload("poller", counts) == node_expected_payload(
            NodeRole.POLLER,
            counts,
        )

    @pytest.mark.parametrize("role", ["gateway", "", None, 3])
    def test_unknown_role_raises(self, role):
        """Anything outside peer, poller and master fails."""
        with pytest.raises(UnknownRoleError):
            node_expected_payload(role, RoleCounts(peers=1))

    @pytest.mark.parametrize("role", list(NodeRole))
    def test_idempotent(self, role: NodeRole):
        """Same input, same output."""
        counts = RoleCounts(peers=3, pollers=2, masters=1)

        assert node_expected_payload(role, counts) == node_expected_payload(role, counts)
        assert sut_expected_payload(counts) == sut_expected_payload(counts)


# =============================================================================
# Scenarios
# =============================================================================


class TestExpectationScenarios:
    """Whole topology scenarios."""

    def test_two_peers_one_poller(self):
        """2 peers and 1 poller: peer {2,1,0}, poller {0,0,3}."""
        topology = build_topology(
            [
                {"name": "peer1", "role": "peer", "port_offset": 1},
                {"name": "peer2", "role": "peer", "port_offset": 2},
                {"name": "poller1", "role": "poller", "port_offset": 3},
            ],
            7000,
        )

        counts = count_roles(topology)

        assert counts == RoleCounts(peers=2, pollers=1, masters=0)
        assert node_expected_payload(NodeRole.PEER, counts) == payload(2, 1, 0)
        assert node_expected_payload(NodeRole.POLLER, counts) == payload(0, 0, 3)

    def test_single_master(self):
        """A lone master expects {0,0,0}, not {0,0,1}."""
        topology = build_topology(
            [{"name": "master1", "role": "master", "port_offset": 1}],
            7000,
        )

        counts = count_roles(topology)

        assert counts == RoleCounts(peers=0, pollers=0, masters=1)
        assert node_expected_payload(NodeRole.MASTER, counts) == payload(0, 0, 0)
        assert node_expected_payload(NodeRole.MASTER, counts) != payload(0, 0, 1)
