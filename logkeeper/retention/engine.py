"""
Retention engine for dated log files.

Walks the local and remote inventories once per run and applies the
retention policy: compress and upload raw logs inside the upload window,
delete raw logs that are too old everywhere, and sweep expired archives from
both stores. Every decision is logged so a run can be reconstructed from the
log alone.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from loguru import logger

from logkeeper.errors import (
    ConfigurationError,
    InvalidLogNameError,
    LogKeeperError,
    NotFoundError,
)
from logkeeper.retention.policy import (
    PromotionAction,
    RetentionPolicy,
    archive_name_for,
)
from logkeeper.storage.base import LogStore
from logkeeper.utils.dates import age_in_days


@dataclass
class RunReport:
    """
    Result of a retention run.

    Attributes:
        today: Reference date every age was computed against
        dry_run: Whether store mutations were suppressed
        compressed: Raw logs compressed into local archives
        uploaded: Archives put on the remote store
        deleted_local: Raw logs and archives removed locally
        deleted_remote: Archives removed from the remote store
        kept: Files left untouched
        skipped: Files that could not be evaluated (no date in name)
        errors: Per-file failures recorded with continue_on_error
        duration_seconds: Time taken for the run
    """

    today: date
    dry_run: bool = False
    compressed: list[str] = field(default_factory=list)
    uploaded: list[str] = field(default_factory=list)
    deleted_local: list[str] = field(default_factory=list)
    deleted_remote: list[str] = field(default_factory=list)
    kept: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        """Check if the run finished without recorded errors."""
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "today": self.today.isoformat(),
            "dry_run": self.dry_run,
            "compressed": list(self.compressed),
            "uploaded": list(self.uploaded),
            "deleted_local": list(self.deleted_local),
            "deleted_remote": list(self.deleted_remote),
            "kept": list(self.kept),
            "skipped": list(self.skipped),
            "errors": list(self.errors),
            "duration_seconds": self.duration_seconds,
        }


class RetentionEngine:
    """
    Applies a RetentionPolicy to a local and a remote LogStore.

    The reference date is captured once at construction and shared by every
    decision of the run.
    """

    def __init__(
        self,
        policy: RetentionPolicy,
        local_store: LogStore,
        remote_store: LogStore | None = None,
        today: date | None = None,
        dry_run: bool = False,
        continue_on_error: bool = False,
    ):
        """
        Initialize the retention engine.

        Args:
            policy: Retention thresholds for this run
            local_store: Store holding raw logs and local archives
            remote_store: Store receiving archives (required when remote is enabled)
            today: Reference date (defaults to date.today())
            dry_run: If True, only log and report what would be done
            continue_on_error: If True, record a failing file and move on
                instead of propagating the error
        """
        if policy.enabled and policy.enabled_remote and remote_store is None:
            raise ConfigurationError(
                "remote_store is required when remote operations are enabled"
            )

        self.policy = policy
        self.local_store = local_store
        self.remote_store = remote_store
        self.today = today or date.today()
        self.dry_run = dry_run
        self.continue_on_error = continue_on_error

    def run(self) -> RunReport:
        """
        Run the local and remote phases.

        Returns:
            RunReport describing every action taken

        Raises:
            LogKeeperError: On the first storage failure, unless continue_on_error
        """
        report = RunReport(today=self.today, dry_run=self.dry_run)
        policy = self.policy

        if not policy.enabled:
            logger.warning("Log Keeper can't work because it is disabled")
            return report

        start_time = time.time()

        logger.info(f"Starting Log Keeper (today={self.today}, dry_run={self.dry_run})")
        logger.info(f"Local Retention: {policy.local_retention_days} days")
        logger.info(f"Uploading logs older than: {policy.upload_to_remote_after_days} days")
        logger.info(f"Remote Retention: {policy.remote_retention_days} days")
        logger.info(f"Calculated Retention: {policy.remote_retention_days_calculated} days")

        self._local_phase(report)

        if policy.enabled_remote:
            self._remote_cleanup(report)
        else:
            logger.warning("Log Keeper is not enabled for remote operations")

        report.duration_seconds = time.time() - start_time

        logger.info(
            f"Log Keeper finished: uploaded={len(report.uploaded)}, "
            f"deleted_local={len(report.deleted_local)}, "
            f"deleted_remote={len(report.deleted_remote)}, errors={len(report.errors)}"
        )
        return report

    def _age(self, name: str, report: RunReport) -> int | None:
        """Age of a file, or None (with a warning) when its name has no date."""
        try:
            days = age_in_days(name, self.today)
        except InvalidLogNameError as e:
            logger.warning(f"Skipping {name}: {e}")
            report.skipped.append(name)
            return None

        logger.info(f"{name} is {days} day(s) old")
        return days

    def _guarded(self, name: str, report: RunReport, action, *args) -> None:
        """Run a per-file action, propagating or recording its failure."""
        try:
            action(*args)
        except LogKeeperError as e:
            if not self.continue_on_error:
                raise
            logger.error(f"Error processing {name}: {e}")
            report.errors.append(f"{name}: {e}")

    def _delete(self, store: LogStore, name: str) -> bool:
        """
        Delete a file, treating an already-missing file as done.

        Returns:
            True if the file was removed by this call
        """
        if self.dry_run:
            return True
        try:
            store.delete(name)
        except NotFoundError:
            logger.warning(f"{name} was already gone from {store!r}, nothing to delete")
            return False
        return True

    def _local_phase(self, report: RunReport) -> None:
        if self.policy.enabled_remote:
            # One snapshot of the remote inventory so a re-run does not upload twice
            uploaded = set(self.remote_store.list_archived_logs())

            for log in self.local_store.list_raw_logs():
                logger.info(f"Analysing {log}")
                days = self._age(log, report)
                if days is None:
                    continue
                self._guarded(log, report, self._promote, log, days, uploaded, report)

        self._local_cleanup(report)

    def _promote(self, log: str, days: int, uploaded: set[str], report: RunReport) -> None:
        decision = self.policy.decide_promotion(days)

        if decision.action is PromotionAction.UPLOAD:
            archive = archive_name_for(log)

            if archive in uploaded:
                logger.info(f"{archive} is already uploaded, keeping {log}")
                report.kept.append(log)
                return

            logger.info(f"Compressing {log} into {archive}")
            if not self.dry_run:
                self.local_store.compress(log, archive)
            report.compressed.append(archive)

            logger.info(f"Uploading {archive}")
            if not self.dry_run:
                content = self.local_store.fetch(archive)
                self.remote_store.store(archive, content)
            uploaded.add(archive)
            report.uploaded.append(archive)

            if decision.delete_local_archive:
                logger.info(f"Deleting {archive} locally")
                if self._delete(self.local_store, archive):
                    report.deleted_local.append(archive)
            return

        if decision.action is PromotionAction.DELETE:
            logger.info(f"Deleting {log} because it is too old to be kept either locally or remotely")
            if self._delete(self.local_store, log):
                report.deleted_local.append(log)
            return

        logger.info(f"Keeping {log}")
        report.kept.append(log)

    def _local_cleanup(self, report: RunReport) -> None:
        if self.policy.keeps_local_forever:
            logger.info("Removing local logs is disabled.")
            return

        for log in self.local_store.list_archived_logs():
            if self.dry_run and log in report.deleted_local:
                # Already removed during promotion in this (simulated) run
                continue
            days = self._age(log, report)
            if days is None:
                continue

            if self.policy.exceeds_local_retention(days):
                logger.info(f"Deleting {log} locally")
                self._guarded(log, report, self._sweep, self.local_store, log, report.deleted_local)
            else:
                logger.info(f"Keeping {log}")
                report.kept.append(log)

    def _remote_cleanup(self, report: RunReport) -> None:
        if self.policy.keeps_remote_forever:
            logger.info("Removing remote logs is disabled.")
            return

        logger.info("Starting remote clean up")

        for log in self.remote_store.list_archived_logs():
            days = self._age(log, report)
            if days is None:
                continue

            if self.policy.exceeds_remote_retention(days):
                logger.info(f"Deleting {log}")
                self._guarded(log, report, self._sweep, self.remote_store, log, report.deleted_remote)
            else:
                logger.info(f"Keeping {log}")
                report.kept.append(log)

    def _sweep(self, store: LogStore, name: str, deleted: list[str]) -> None:
        if self._delete(store, name):
            deleted.append(name)
