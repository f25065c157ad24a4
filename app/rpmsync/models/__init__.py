"""Data models for rpmsync.

This module exports the core data structures used throughout the application.
"""

from rpmsync.models.plan import (
    DEFAULT_DIR_MODE,
    CopyMode,
    DirectoryStep,
    EntryKind,
    PruneEntry,
    PrunePlan,
    SyncPlan,
)
from rpmsync.models.request import LifecyclePhase, ReconciliationRequest, RpmStatus

__all__ = [
    "DEFAULT_DIR_MODE",
    "CopyMode",
    "DirectoryStep",
    "EntryKind",
    "LifecyclePhase",
    "PruneEntry",
    "PrunePlan",
    "ReconciliationRequest",
    "RpmStatus",
    "SyncPlan",
]
