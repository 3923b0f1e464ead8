"""Optimistic list cache: store, patch engine and mutation coordinator."""

from __future__ import annotations

from .coordinator import (
    FieldPatch,
    MutationCoordinator,
    MutationKind,
    PatchStatus,
    PendingPatch,
    RemoteCall,
)
from .patches import (
    NOOP,
    Insert,
    Intent,
    Noop,
    Patch,
    PatchFields,
    Remove,
    Replace,
    Restore,
    apply_intent,
    compute_patch,
    sort_snapshot,
)
from .store import ListSnapshot, QueryCache, QueryKey, Subscriber, Unsubscribe

__all__ = [
    "NOOP",
    "FieldPatch",
    "Insert",
    "Intent",
    "ListSnapshot",
    "MutationCoordinator",
    "MutationKind",
    "Noop",
    "Patch",
    "PatchFields",
    "PatchStatus",
    "PendingPatch",
    "QueryCache",
    "QueryKey",
    "RemoteCall",
    "Remove",
    "Replace",
    "Restore",
    "Subscriber",
    "Unsubscribe",
    "apply_intent",
    "compute_patch",
    "sort_snapshot",
]
