"""Pipeline module - the reconcile run coordinator."""
from vaultsync.pipeline.sync_pipeline import (
    KIND_ORDER,
    KindReport,
    SyncPipeline,
    SyncReport,
)

__all__ = ["KIND_ORDER", "KindReport", "SyncPipeline", "SyncReport"]
