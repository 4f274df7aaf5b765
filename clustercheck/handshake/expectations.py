"""
Expected CTRL_ACTIVE payloads, derived from the role counts of a topology.

Each role maps to one pure function. Two of the formulas carry known
limitations and are kept exactly as existing scenarios expect them:

- poller: assumes the topology has a single poller group.
- master: always reports zero counts, although a master should report
  the cluster as its poller sees it.
"""

from typing import Any, Callable

from clustercheck.topology.models import NodeRole, RoleCounts

from .payload import HandshakePayload


def sut_expected_payload(counts: RoleCounts) -> HandshakePayload:
    return HandshakePayload(
        configured_peers=counts.peers,
        configured_pollers=counts.pollers,
        configured_masters=counts.masters,
    )


def _peer_payload(counts: RoleCounts) -> HandshakePayload:
    return HandshakePayload(
        configured_peers=counts.peers,
        configured_pollers=counts.pollers,
        configured_masters=counts.masters,
    )


def _poller_payload(counts: RoleCounts) -> HandshakePayload:
    # Sibling pollers count as peers; the SUT and its peers count as masters.
    # TODO: per-group counts once topologies can declare poller groups.
    return HandshakePayload(
        configured_peers=counts.pollers - 1,
        configured_pollers=0,
        configured_masters=counts.peers + 1,
    )


def _master_payload(counts: RoleCounts) -> HandshakePayload:
    # Zero regardless of counts, see module docstring.
    return HandshakePayload(
        configured_peers=0,
        configured_pollers=0,
        configured_masters=0,
    )


EXPECTED_PAYLOADS: dict[NodeRole, Callable[[RoleCounts], HandshakePayload]] = {
    NodeRole.PEER: _peer_payload,
    NodeRole.POLLER: _poller_payload,
    NodeRole.MASTER: _master_payload,
}


def node_expected_payload(role: NodeRole | Any, counts: RoleCounts) -> HandshakePayload:
    """
    Payload a node of the given role must send and receive. Raises
    UnknownRoleError for anything other than peer, poller or master.
    """
    return EXPECTED_PAYLOADS[NodeRole.parse(role)](counts)
