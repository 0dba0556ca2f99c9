"""
Retention policy for dated log files.

Holds the four retention thresholds and the pure, age-based decisions the
engine applies to each file. All boundaries are strict ``>`` except the upper
edge of the upload window, which is inclusive.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from logkeeper.errors import ConfigurationError

ARCHIVE_SUFFIX = ".tar.bz2"


class PromotionAction(Enum):
    """Outcome of the promotion decision for a raw local log."""

    UPLOAD = "upload"
    DELETE = "delete"
    KEEP = "keep"


@dataclass(frozen=True)
class PromotionDecision:
    """
    Decision for a single raw local log.

    Attributes:
        action: What to do with the raw log
        delete_local_archive: For UPLOAD, whether the local archive copy is
            removed after upload
    """

    action: PromotionAction
    delete_local_archive: bool = False


@dataclass(frozen=True)
class RetentionPolicy:
    """
    Retention thresholds for one run.

    A value of 0 for local_retention_days or remote_retention_days means
    "keep forever", never "keep for zero days".
    """

    enabled: bool = True
    enabled_remote: bool = True
    local_retention_days: int = 7
    upload_to_remote_after_days: int = 1
    remote_retention_days: int = 30
    calculated_override: int | None = None

    def __post_init__(self) -> None:
        """Reject negative thresholds."""
        for name in (
            "local_retention_days",
            "upload_to_remote_after_days",
            "remote_retention_days",
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be >= 0, got: {getattr(self, name)}")

        if self.calculated_override is not None:
            if self.calculated_override < self.upload_to_remote_after_days:
                raise ConfigurationError(
                    "remote_retention_days_calculated must be >= "
                    f"upload_to_remote_after_days ({self.upload_to_remote_after_days}), "
                    f"got: {self.calculated_override}"
                )

    @property
    def remote_retention_days_calculated(self) -> int:
        """Remote horizon in file-age terms (upload delay + remote retention)."""
        if self.calculated_override is not None:
            return self.calculated_override
        return self.remote_retention_days + self.upload_to_remote_after_days

    @property
    def keeps_local_forever(self) -> bool:
        return self.local_retention_days == 0

    @property
    def keeps_remote_forever(self) -> bool:
        return self.remote_retention_days == 0

    def in_upload_window(self, age_days: int) -> bool:
        """
        Check if a raw log falls in (upload_after, calculated] or the remote keeps forever.
        """
        return age_days > self.upload_to_remote_after_days and (
            age_days <= self.remote_retention_days_calculated or self.keeps_remote_forever
        )

    def exceeds_local_retention(self, age_days: int) -> bool:
        """True if a local file is past its horizon (never, when local retention is 0)."""
        return not self.keeps_local_forever and age_days > self.local_retention_days

    def exceeds_remote_retention(self, age_days: int) -> bool:
        """True if a remote archive is past its horizon (never, when remote retention is 0)."""
        return not self.keeps_remote_forever and age_days > self.remote_retention_days_calculated

    def too_old_everywhere(self, age_days: int) -> bool:
        """
        Check if a raw log missed the upload window and is past both horizons.

        Mirrors the raw comparison against local_retention_days, so a local
        retention of 0 does not protect a raw log here.
        """
        return (
            age_days > self.local_retention_days
            and age_days > self.remote_retention_days_calculated
        )

    def _upload(self, age_days: int) -> PromotionDecision:
        return PromotionDecision(
            action=PromotionAction.UPLOAD,
            delete_local_archive=self.exceeds_local_retention(age_days),
        )

    @property
    def promotion_rules(
        self,
    ) -> tuple[tuple[Callable[[int], bool], Callable[[int], PromotionDecision]], ...]:
        """Ordered (guard, decision) pairs; the first matching guard wins."""
        return (
            (self.in_upload_window, self._upload),
            (self.too_old_everywhere, lambda _: PromotionDecision(PromotionAction.DELETE)),
        )

    def decide_promotion(self, age_days: int) -> PromotionDecision:
        """
        Decide what happens to a raw local log of the given age.

        Args:
            age_days: Age of the log in days

        Returns:
            PromotionDecision (KEEP when no rule matches)
        """
        for guard, decision in self.promotion_rules:
            if guard(age_days):
                return decision(age_days)
        return PromotionDecision(PromotionAction.KEEP)


def archive_name_for(name: str) -> str:
    """Archive name for a raw log."""
    return f"{name}{ARCHIVE_SUFFIX}"
