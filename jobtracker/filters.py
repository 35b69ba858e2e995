"""Free-text filtering of application records."""

from typing import Sequence

from .models import ApplicationRecord


def filter_records(records: Sequence[ApplicationRecord], query: str) -> list[ApplicationRecord]:
    """Return records whose company, role, status or tags contain the query.

    Matching is a case-insensitive substring test; an empty query keeps
    every record in its original order.
    """
    q = (query or "").strip().lower()
    if not q:
        return list(records)
    return [record for record in records if q in record.search_text()]
