from collections import Counter

from .models import NodeRole, RoleCounts, Topology


def count_roles(topology: Topology) -> RoleCounts:
    tally = Counter(node.role for node in topology.nodes)

    return RoleCounts(
        peers=tally[NodeRole.PEER],
        pollers=tally[NodeRole.POLLER],
        masters=tally[NodeRole.MASTER],
    )
