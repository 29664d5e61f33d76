"""Application context with dependency injection."""

from dataclasses import dataclass

from clonegc.core.config import CleanupConfig
from clonegc.core.errors import ConfigurationError
from clonegc.core.executor import CleanupExecutor, DryRunExecutor
from clonegc.core.export import DotFileExporter, GraphExporter
from clonegc.core.oracle import DeletionListOracle, LivenessOracle
from clonegc.core.storage import RealRbdStorage, StorageDiscovery
from clonegc.core.time import RealTime, Time


@dataclass(frozen=True)
class CleanupContext:
    """Immutable context holding all dependencies for a cleanup run.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    storage: StorageDiscovery
    oracle: LivenessOracle
    exporter: GraphExporter
    executor: CleanupExecutor
    time: Time
    config: CleanupConfig

    @staticmethod
    def for_test(
        storage: StorageDiscovery | None = None,
        oracle: LivenessOracle | None = None,
        exporter: GraphExporter | None = None,
        executor: CleanupExecutor | None = None,
        time: Time | None = None,
        config: CleanupConfig | None = None,
    ) -> "CleanupContext":
        """Create a context whose unspecified dependencies are fakes.

        Example:
            >>> storage = FakeStorage(volumes=["base"])
            >>> ctx = CleanupContext.for_test(storage=storage)
            >>> result = runner.invoke(cli, ["clean"], obj=ctx)
        """
        from clonegc.core.executor.fake import FakeCleanupExecutor
        from clonegc.core.export.fake import FakeGraphExporter
        from clonegc.core.oracle.fake import FakeOracle
        from clonegc.core.storage.fake import FakeStorage
        from clonegc.core.time.fake import FakeTime

        return CleanupContext(
            storage=storage or FakeStorage(),
            oracle=oracle or FakeOracle(),
            exporter=exporter or FakeGraphExporter(),
            executor=executor or FakeCleanupExecutor(),
            time=time or FakeTime(),
            config=config or CleanupConfig(pool="test-pool"),
        )


def create_context(config: CleanupConfig) -> CleanupContext:
    """Create production context with real implementations.

    Called at CLI entry point once the configuration is resolved.

    Raises:
        ConfigurationError: If the pool or the deletion list is not configured
    """
    if config.pool is None:
        raise ConfigurationError("No pool configured; pass --pool or set CEPH_POOL")
    if config.deleted_list is None:
        raise ConfigurationError(
            "No deletion list configured; pass --deleted-list or set deleted_list in the config"
        )

    return CleanupContext(
        storage=RealRbdStorage(config.pool, conf_file=config.conf_file, keyring=config.keyring),
        oracle=DeletionListOracle(config.deleted_list),
        exporter=DotFileExporter(config.graph_dir),
        executor=DryRunExecutor(),
        time=RealTime(),
        config=config,
    )
