from __future__ import annotations

import random

import pytest

from jobtracker.models import ApplicationRecord, ApplicationStatus
from jobtracker.storage import SqliteSlot
from jobtracker.store import RecordStore


def make_record(
    *,
    record_id: str = "r1",
    company: str = "Stripe",
    role: str = "Staff Engineer",
    location: str = "Remote",
    status: ApplicationStatus = ApplicationStatus.APPLIED,
    vibe: str = "🙂",
    fit: int = 80,
    tags: str = "FinTech,Infra",
    notes: str = "",
    applied: str = "2024-03-01",
) -> ApplicationRecord:
    return ApplicationRecord(
        id=record_id,
        company=company,
        role=role,
        location=location,
        status=status,
        vibe=vibe,
        fit=fit,
        tags=tags,
        notes=notes,
        applied=applied,
    )


@pytest.fixture
def slot(tmp_path) -> SqliteSlot:
    return SqliteSlot(tmp_path / "tracker.sqlite")


@pytest.fixture
def store(slot) -> RecordStore:
    return RecordStore(slot, sample_size=5, rng=random.Random(7))
