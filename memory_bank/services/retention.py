"""Version retention policy.

Pure decision logic: given every version of one file (newest first) and a
``RetentionConfig``, decide which versions a cleanup pass deletes. Nothing
here touches storage.

Two rules, unioned:

- count rule: everything after the first ``max_versions_per_file`` entries;
- age rule: when ``auto_cleanup_old_versions`` is on and
  ``preserve_versions_for_days`` > 0, every version created before
  ``now - preserve_versions_for_days``.

There is no floor. ``max_versions_per_file=0`` or an aggressive age
threshold removes the whole history of a file.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence, TypeVar

from ..core.timeutils import as_utc, utcnow

DEFAULT_MAX_VERSIONS_PER_FILE = 10
DEFAULT_PRESERVE_VERSIONS_FOR_DAYS = 30

V = TypeVar("V")


@dataclass(frozen=True)
class RetentionConfig:
    """Retention settings for one cleanup pass. Not persisted."""

    max_versions_per_file: int = DEFAULT_MAX_VERSIONS_PER_FILE
    auto_cleanup_old_versions: bool = True
    preserve_versions_for_days: int = DEFAULT_PRESERVE_VERSIONS_FOR_DAYS

    @classmethod
    def from_settings(cls, settings, max_versions_per_file: Optional[int] = None) -> "RetentionConfig":
        """Build from application settings, optionally overriding the count."""
        if max_versions_per_file is None:
            max_versions_per_file = settings.max_versions_per_file
        return cls(
            max_versions_per_file=max_versions_per_file,
            auto_cleanup_old_versions=settings.auto_cleanup_old_versions,
            preserve_versions_for_days=settings.preserve_versions_for_days,
        )

    def age_cutoff(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """Versions created before this instant are expired; None if the age rule is off."""
        if not self.auto_cleanup_old_versions or self.preserve_versions_for_days <= 0:
            return None
        return as_utc(now or utcnow()) - timedelta(days=self.preserve_versions_for_days)


def select_versions_to_delete(
    versions: Sequence[V],
    config: RetentionConfig,
    now: Optional[datetime] = None,
) -> list[V]:
    """Return the versions a cleanup pass should delete, newest first.

    Args:
        versions: All versions of one file, ordered by version number
            descending. Items need ``created_at``.
        config: Retention settings.
        now: Reference time for the age rule (injectable for testing).

    Returns:
        Subset of *versions*, each at most once, in input order.
    """
    keep = max(config.max_versions_per_file, 0)
    cutoff = config.age_cutoff(now)

    doomed = []
    for index, version in enumerate(versions):
        over_count = index >= keep
        expired = cutoff is not None and as_utc(version.created_at) < cutoff
        if over_count or expired:
            doomed.append(version)
    return doomed
