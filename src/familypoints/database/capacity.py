"""Storage capacity estimation."""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from familypoints.domain.entities import CapacityInfo
from familypoints.utils.byte_format import format_bytes

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class StorageEstimate:
    """Raw usage and quota in bytes."""

    usage: int
    quota: int


# Returns None when the environment cannot report usage.
Estimator = Callable[[], Optional[StorageEstimate]]


class FileQuotaEstimator:
    """Estimate usage of a file-backed store.

    Usage is the size of the database file plus any SQLite journal files next
    to it. Quota is `quota_bytes` when configured, otherwise the size of the
    filesystem holding the file.
    """

    JOURNAL_SUFFIXES = ("-journal", "-wal", "-shm")

    def __init__(self, path: Optional[str], quota_bytes: Optional[int] = None):
        self.path = Path(path) if path else None
        self.quota_bytes = quota_bytes

    def __call__(self) -> Optional[StorageEstimate]:
        if self.path is None:
            return None

        usage = 0
        for candidate in [self.path] + [
            self.path.with_name(self.path.name + suffix) for suffix in self.JOURNAL_SUFFIXES
        ]:
            if candidate.exists():
                usage += candidate.stat().st_size

        if self.quota_bytes is not None:
            quota = self.quota_bytes
        else:
            quota = shutil.disk_usage(self.path.parent).total

        return StorageEstimate(usage=usage, quota=quota)


def unknown_capacity() -> CapacityInfo:
    """Return the zeroed result used when usage cannot be determined."""
    return CapacityInfo(
        used_bytes=0,
        quota_bytes=0,
        percentage=0.0,
        used_formatted=UNKNOWN,
        quota_formatted=UNKNOWN,
    )


def build_capacity_info(estimate: StorageEstimate) -> CapacityInfo:
    """Turn a raw estimate into a CapacityInfo. A zero quota reports 0%."""
    percentage = (estimate.usage / estimate.quota) * 100 if estimate.quota > 0 else 0.0
    return CapacityInfo(
        used_bytes=estimate.usage,
        quota_bytes=estimate.quota,
        percentage=percentage,
        used_formatted=format_bytes(estimate.usage),
        quota_formatted=format_bytes(estimate.quota),
    )


def estimate_capacity(estimator: Optional[Estimator]) -> CapacityInfo:
    """Query `estimator`, falling back to an unknown result on any OS failure."""
    if estimator is None:
        return unknown_capacity()
    try:
        estimate = estimator()
    except OSError as e:
        logger.warning("Could not estimate storage usage: %s", e)
        return unknown_capacity()
    if estimate is None:
        return unknown_capacity()
    return build_capacity_info(estimate)
