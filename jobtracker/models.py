"""Data models for job application tracking."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ApplicationStatus(str, Enum):
    """Pipeline stage of an application, in display order."""

    RESEARCH = "Research"
    APPLIED = "Applied"
    INTERVIEWING = "Interviewing"
    OFFER = "Offer"
    REJECTED = "Rejected"

    @classmethod
    def coerce(cls, value: Optional[str]) -> "ApplicationStatus":
        """Map free text to a status, falling back to Applied."""
        if value:
            wanted = value.strip().lower()
            for status in cls:
                if status.value.lower() == wanted:
                    return status
        return cls.APPLIED


STATUSES = [status.value for status in ApplicationStatus]

ACTIVE_STATUSES = (
    ApplicationStatus.RESEARCH,
    ApplicationStatus.APPLIED,
    ApplicationStatus.INTERVIEWING,
)

VIBES = ["😐", "🙂", "😊", "🔥"]


class ApplicationRecord(BaseModel):
    """Represents one tracked job application."""

    model_config = {"frozen": True}

    id: str
    company: str = ""
    role: str = ""
    location: str = "Remote"
    status: ApplicationStatus = ApplicationStatus.APPLIED
    vibe: str = ""  # one of VIBES when generated, free text when imported
    fit: int = Field(0, ge=0)
    tags: str = ""
    notes: str = ""
    applied: str = ""  # ISO date, not validated on import

    def to_row(self) -> list[str]:
        """Convert to CSV row format, in export column order."""
        return [
            self.company,
            self.role,
            self.location,
            self.status.value,
            self.vibe,
            str(self.fit),
            self.tags,
            self.notes,
            self.applied,
        ]

    def search_text(self) -> str:
        """Lower-cased text the free-text filter matches against."""
        return " ".join(
            [self.company, self.role, self.status.value, self.tags]
        ).lower()
