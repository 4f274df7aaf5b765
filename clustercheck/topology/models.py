"""
Topology model for a star-shaped monitoring cluster.

The system under test listens on ``sut_port``; every simulated node
connects to it from ``sut_port + port_offset``. Everything here is
immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import UnknownRoleError


class NodeRole(str, Enum):
    """Role of a node connected to the system under test."""
    PEER = "peer"
    POLLER = "poller"
    MASTER = "master"

    @classmethod
    def parse(cls, value: Any) -> NodeRole:
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            try:
                return cls(value.strip().lower())

            except ValueError:
                pass

        raise UnknownRoleError(value)


@dataclass(slots=True, frozen=True)
class NodeSpec:
    """
    Unvalidated node description, one row of a scenario table.

    ``role`` is left as given so validation happens in one place.
    """
    name: str
    role: Any
    port_offset: Any


@dataclass(slots=True, frozen=True)
class NodeDescriptor:
    name: str                    # Unique within the topology
    role: NodeRole
    port_offset: int             # Source port is sut_port + port_offset

    def local_port(self, sut_port: int) -> int:
        return sut_port + self.port_offset


@dataclass(slots=True, frozen=True)
class RoleCounts:
    """Number of nodes of each role in a topology."""
    peers: int = 0
    pollers: int = 0
    masters: int = 0

    @property
    def total(self) -> int:
        return self.peers + self.pollers + self.masters


@dataclass(slots=True, frozen=True)
class Topology:
    sut_port: int
    nodes: tuple[NodeDescriptor, ...] = ()

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    @property
    def names(self) -> list[str]:
        return [node.name for node in self.nodes]
