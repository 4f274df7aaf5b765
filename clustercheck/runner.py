from clustercheck.env import Env, load_env
from clustercheck.handshake import DriverConfig, HandshakeDriver
from clustercheck.harness import TCPHarness
from clustercheck.logging import Logger, LoggingConfig
from clustercheck.topology import Topology
from clustercheck.topology.builder import build_topology
from clustercheck.verification import VerificationReport


__all__ = [
    "build_topology",
    "run_verification",
]


async def run_verification(
    topology: Topology,
    harness: TCPHarness | None = None,
    env: Env | None = None,
    logger: Logger | None = None,
    parallel: bool | None = None,
    verify_baseline: bool = True,
) -> VerificationReport:
    """
    Verify the SUT baseline and then every node handshake of the topology.

    When no harness is given a TCPHarness is built from ``env`` and closed
    afterwards; if the env names a baseline port or socket it listens there
    for the SUT's baseline connection.

    Raises BaselineVerificationError if the SUT baseline does not match.
    Per node connection failures and timeouts are recorded as failed
    outcomes in the returned report.
    """
    if env is None:
        env = load_env(Env)

    LoggingConfig().update(**env.get_logging_config())

    owns_logger = logger is None
    if owns_logger:
        logger = Logger()

        if env.CLUSTERCHECK_LOG_DIRECTORY:
            logger.configure(path="clustercheck.json")

    config = DriverConfig(
        **env.get_driver_config(),
        verify_baseline=verify_baseline,
    )

    if parallel is not None:
        config.parallel = parallel

    owns_harness = harness is None
    if owns_harness:
        harness = TCPHarness.from_env(env, logger=logger)

    try:
        if owns_harness and (listen_config := env.get_baseline_listen_config()):
            await harness.listen(
                config.baseline_connection,
                **listen_config,
            )

        driver = HandshakeDriver(
            harness,
            harness,
            harness,
            config=config,
            logger=logger,
        )

        return await driver.run(topology)

    finally:
        if owns_harness:
            await harness.close()

        if owns_logger:
            await logger.close()

