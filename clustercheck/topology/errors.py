from typing import Any

from clustercheck.errors import ClusterCheckError


class InvalidTopologyError(ClusterCheckError):
    """Raised when a topology description is malformed."""

    def __init__(self, message: str, node_name: str | None = None):
        self.node_name = node_name

        if node_name is not None:
            message = f"Node '{node_name}': {message}"

        super().__init__(f"Invalid topology - {message}")


class UnknownRoleError(ClusterCheckError):
    """Raised when a node role is not one of peer, poller or master."""

    def __init__(self, role: Any):
        self.role = role
        super().__init__(
            f"Unknown node role '{role}', expected one of peer, poller, master"
        )
