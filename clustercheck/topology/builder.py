from collections.abc import Iterable, Mapping
from typing import Any

from .errors import InvalidTopologyError
from .models import (
    NodeDescriptor,
    NodeRole,
    NodeSpec,
    Topology,
)


MIN_PORT = 1
MAX_PORT = 65535

NodeSpecLike = NodeSpec | NodeDescriptor | Mapping[str, Any]


def _to_node_spec(raw: NodeSpecLike) -> NodeSpec:
    if isinstance(raw, NodeSpec):
        return raw

    if isinstance(raw, NodeDescriptor):
        return NodeSpec(
            name=raw.name,
            role=raw.role,
            port_offset=raw.port_offset,
        )

    if not isinstance(raw, Mapping):
        raise InvalidTopologyError(
            f"node spec must be a mapping or NodeSpec, got {type(raw).__name__}"
        )

    # Scenario tables name these columns "type" and "port".
    role = raw.get("role", raw.get("type"))
    port_offset = raw.get("port_offset", raw.get("port", 0))

    return NodeSpec(
        name=raw.get("name"),
        role=role,
        port_offset=port_offset,
    )


def _parse_port_offset(value: Any, node_name: str) -> int:
    if isinstance(value, bool):
        raise InvalidTopologyError(
            f"port offset must be an integer, got {value!r}",
            node_name=node_name,
        )

    if isinstance(value, str):
        try:
            value = int(value.strip())

        except ValueError:
            raise InvalidTopologyError(
                f"port offset must be an integer, got {value!r}",
                node_name=node_name,
            )

    if not isinstance(value, int):
        raise InvalidTopologyError(
            f"port offset must be an integer, got {value!r}",
            node_name=node_name,
        )

    if value < 0:
        raise InvalidTopologyError(
            f"port offset must be >= 0, got {value}",
            node_name=node_name,
        )

    return value


def _validate_sut_port(sut_port: Any) -> int:
    if isinstance(sut_port, bool) or not isinstance(sut_port, int):
        raise InvalidTopologyError(f"SUT port must be an integer, got {sut_port!r}")

    if not MIN_PORT <= sut_port <= MAX_PORT:
        raise InvalidTopologyError(
            f"SUT port must be in range {MIN_PORT}-{MAX_PORT}, got {sut_port}"
        )

    return sut_port


def build_topology(
    node_specs: Iterable[NodeSpecLike],
    sut_port: int,
) -> Topology:
    """
    Validate node specs and build an immutable Topology.

    Raises InvalidTopologyError for empty or duplicate names, negative or
    non-integer port offsets and out of range ports. Unknown roles raise
    UnknownRoleError.
    """
    sut_port = _validate_sut_port(sut_port)

    nodes: list[NodeDescriptor] = []
    seen: set[str] = set()

    for raw in node_specs:
        spec = _to_node_spec(raw)

        name = spec.name.strip() if isinstance(spec.name, str) else spec.name
        if not isinstance(name, str) or len(name) == 0:
            raise InvalidTopologyError("node name must be a non-empty string")

        if name in seen:
            raise InvalidTopologyError("duplicate node name", node_name=name)

        port_offset = _parse_port_offset(spec.port_offset, name)
        if sut_port + port_offset > MAX_PORT:
            raise InvalidTopologyError(
                f"local port {sut_port + port_offset} exceeds {MAX_PORT}",
                node_name=name,
            )

        seen.add(name)
        nodes.append(
            NodeDescriptor(
                name=name,
                role=NodeRole.parse(spec.role),
                port_offset=port_offset,
            )
        )

    return Topology(
        sut_port=sut_port,
        nodes=tuple(nodes),
    )
