"""
Log retention policy and engine.

Usage:
    from logkeeper.retention import RetentionEngine, RetentionPolicy
    from logkeeper.storage import FilesystemLogStore

    policy = RetentionPolicy(local_retention_days=7, upload_to_remote_after_days=1)
    engine = RetentionEngine(
        policy,
        local_store=FilesystemLogStore("storage/logs"),
        remote_store=FilesystemLogStore("/mnt/archive", prefix="proj1-prod"),
    )
    report = engine.run()
"""

from logkeeper.retention.policy import (
    ARCHIVE_SUFFIX,
    PromotionAction,
    PromotionDecision,
    RetentionPolicy,
    archive_name_for,
)
from logkeeper.retention.engine import RetentionEngine, RunReport

__all__ = [
    "ARCHIVE_SUFFIX",
    "PromotionAction",
    "PromotionDecision",
    "RetentionPolicy",
    "RetentionEngine",
    "RunReport",
    "archive_name_for",
]
