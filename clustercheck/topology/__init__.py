from .builder import build_topology as build_topology
from .errors import (
    InvalidTopologyError as InvalidTopologyError,
    UnknownRoleError as UnknownRoleError,
)
from .models import (
    NodeDescriptor as NodeDescriptor,
    NodeRole as NodeRole,
    NodeSpec as NodeSpec,
    RoleCounts as RoleCounts,
    Topology as Topology,
)
from .role_counter import count_roles as count_roles
