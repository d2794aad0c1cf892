"""Sync pipeline - load, apply, barrier, cleanup, review."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from vaultsync.backend.base import BaseBackendClient
from vaultsync.core.config import Settings
from vaultsync.core.secrets import SecretResolver, VaultKVSecretBackend
from vaultsync.loaders import LoaderFactory
from vaultsync.reconcilers import BaseReconciler, ReconcilerFactory
from vaultsync.tasks import DeleteReviewQueue, WritePool

logger = logging.getLogger(__name__)

# Resource kinds in the order they are synced
KIND_ORDER = ("auth_methods", "secrets_engines")


@dataclass
class KindReport:
    """Outcome of syncing one resource kind."""
    kind: str
    declared: List[str] = field(default_factory=list)
    enabled: List[str] = field(default_factory=list)
    writes: int = 0
    deleted: List[str] = field(default_factory=list)
    declined: List[str] = field(default_factory=list)


@dataclass
class SyncReport:
    kinds: List[KindReport] = field(default_factory=list)

    @property
    def writes(self) -> int:
        return sum(k.writes for k in self.kinds)

    @property
    def enabled(self) -> List[str]:
        return [path for k in self.kinds for path in k.enabled]

    @property
    def deleted(self) -> List[str]:
        return [path for k in self.kinds for path in k.deleted]

    @property
    def declined(self) -> List[str]:
        return [path for k in self.kinds for path in k.declined]


class SyncPipeline:
    """
    Drives one reconcile run.

    Everything is loaded (and substituted) and every declared mount type is
    checked against live state before the first mutation, so a bad file or
    a type mismatch aborts the run with the backend untouched. Then, per kind:
    apply -> wait for every queued write -> cleanup on freshly listed
    live state -> sequential deletion review.

    Usage:
        pipeline = SyncPipeline.from_settings(settings, client)
        report = pipeline.run()
    """

    def __init__(
        self,
        client: BaseBackendClient,
        resolver: SecretResolver,
        pool: WritePool,
        review: DeleteReviewQueue,
        config_root: Path,
    ):
        self.client = client
        self.resolver = resolver
        self.pool = pool
        self.review = review
        self.config_root = Path(config_root)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: BaseBackendClient,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> "SyncPipeline":
        resolver = SecretResolver(
            VaultKVSecretBackend(client), base_path=settings.secret_base_path
        )
        return cls(
            client=client,
            resolver=resolver,
            pool=WritePool(client, workers=settings.workers),
            review=DeleteReviewQueue(
                client,
                confirm=confirm,
                max_attempts=settings.confirm_attempts,
                assume_no=settings.assume_no,
            ),
            config_root=Path(settings.configuration_path),
        )

    def load(self, kinds: Sequence[str] = KIND_ORDER) -> Dict[str, Dict[str, Any]]:
        """Load every kind's declared resources."""
        logger.info(f"Loading configuration from {self.config_root}")
        return {
            kind: LoaderFactory.create(kind, self.resolver).load(self.config_root)
            for kind in kinds
        }

    def run(self, kinds: Sequence[str] = KIND_ORDER) -> SyncReport:
        """
        Run a full sync.

        Raises:
            VaultSyncError: On any fatal load, type check, apply or delete failure
        """
        declared_by_kind = self.load(kinds)
        reconcilers = {
            kind: ReconcilerFactory.create(kind, self.client, self.pool, self.review)
            for kind in kinds
        }
        for kind in kinds:
            reconcilers[kind].verify(declared_by_kind[kind])

        report = SyncReport()
        self.pool.start()
        try:
            for kind in kinds:
                report.kinds.append(
                    self.sync_kind(kind, reconcilers[kind], declared_by_kind[kind])
                )
        finally:
            self.pool.close()

        logger.info(
            f"Sync complete: {len(report.enabled)} enabled, {report.writes} writes, "
            f"{len(report.deleted)} deleted, {len(report.declined)} left in place"
        )
        return report

    def sync_kind(
        self, kind: str, reconciler: BaseReconciler, declared: Dict[str, Any]
    ) -> KindReport:
        reconciler.apply(declared)
        logger.debug(f"Waiting for {self.pool.pending} pending write(s) for {kind}")
        self.pool.wait()

        reconciler.cleanup(declared)
        result = self.review.process()

        return KindReport(
            kind=kind,
            declared=sorted(declared),
            enabled=list(reconciler.enabled),
            writes=reconciler.writes_submitted,
            deleted=result.deleted,
            declined=result.declined,
        )
