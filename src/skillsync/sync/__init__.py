"""Synchronizing dependency-shipped skills: orchestration, restore and removal."""

from __future__ import annotations

from skillsync.sync.models import (
    InstallAttempt,
    SyncOptions,
    SyncOutcome,
    SyncPlan,
    SyncReport,
)
from skillsync.sync.orchestrator import SYNC_EVENT, SyncOrchestrator, dedupe_skills
from skillsync.sync.removal import RemoveReport, remove_skills
from skillsync.sync.restore import LockRestorer, RestoreReport, SourceGroup, group_by_source

__all__ = [
    "InstallAttempt",
    "LockRestorer",
    "RemoveReport",
    "RestoreReport",
    "SYNC_EVENT",
    "SourceGroup",
    "SyncOptions",
    "SyncOrchestrator",
    "SyncOutcome",
    "SyncPlan",
    "SyncReport",
    "dedupe_skills",
    "group_by_source",
    "remove_skills",
]
