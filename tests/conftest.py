"""
Shared fixtures for clustercheck tests.
"""

import pytest

from clustercheck.logging.config.logging_config import LoggingConfig
from clustercheck.topology import Topology, build_topology


SUT_PORT = 7000


@pytest.fixture(autouse=True)
def configure_log_level():
    config = LoggingConfig()
    config.reset()
    config.update(log_level="critical")
    yield
    config.reset()


@pytest.fixture
def temp_log_directory(tmp_path) -> str:
    return str(tmp_path)


@pytest.fixture
def sut_port() -> int:
    return SUT_PORT


@pytest.fixture
def mixed_topology() -> Topology:
    """Two peers and one poller, the layout most scenarios use."""
    return build_topology(
        [
            {"name": "peer1", "role": "peer", "port_offset": 1},
            {"name": "peer2", "role": "peer", "port_offset": 2},
            {"name": "poller1", "role": "poller", "port_offset": 3},
        ],
        SUT_PORT,
    )


@pytest.fixture
def full_topology() -> Topology:
    return build_topology(
        [
            {"name": "peer1", "role": "peer", "port_offset": 1},
            {"name": "poller1", "role": "poller", "port_offset": 2},
            {"name": "poller2", "role": "poller", "port_offset": 3},
            {"name": "master1", "role": "master", "port_offset": 4},
        ],
        SUT_PORT,
    )
