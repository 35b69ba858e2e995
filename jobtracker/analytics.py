"""Status counts and summary figures for a set of applications."""

from collections import Counter
from typing import Sequence

from pydantic import BaseModel

from .models import ACTIVE_STATUSES, STATUSES, ApplicationRecord, ApplicationStatus


class StatusSummary(BaseModel):
    """Headline figures shown above the status chart."""

    total: int = 0
    active: int = 0
    offers: int = 0
    rejected: int = 0
    counts: dict[str, int] = {}


def status_counts(records: Sequence[ApplicationRecord]) -> dict[str, int]:
    """Count records per status, in display order, including zero counts."""
    counts = Counter(record.status.value for record in records)
    return {status: counts.get(status, 0) for status in STATUSES}


def summarize(records: Sequence[ApplicationRecord]) -> StatusSummary:
    """Headline figures and per-status counts for records."""
    counts = status_counts(records)
    return StatusSummary(
        total=len(records),
        active=sum(counts[status.value] for status in ACTIVE_STATUSES),
        offers=counts[ApplicationStatus.OFFER.value],
        rejected=counts[ApplicationStatus.REJECTED.value],
        counts=counts,
    )
