"""Sample data for first runs and record id generation."""

import random
from datetime import date, timedelta
from typing import Iterable, Optional

from .models import STATUSES, VIBES, ApplicationRecord

COMPANIES = [
    "Stripe",
    "Coinbase",
    "OpenAI",
    "Anthropic",
    "Square",
    "Ramp",
    "Brex",
    "Datadog",
    "Snowflake",
    "Nvidia",
    "Figma",
    "Linear",
    "Notion",
    "Vercel",
    "Cloudflare",
    "Plaid",
]

ROLES = [
    "Senior PM",
    "Staff Engineer",
    "Data Scientist",
    "Product Analyst",
    "Frontend Eng",
    "Fullstack Eng",
    "ML Eng",
    "DevRel",
]

LOCATIONS = ["Remote", "NYC", "SF", "Seattle", "Austin", "Remote (US)"]

TAGS_POOL = ["FinTech", "AI", "Crypto", "DevTools", "Infra", "SaaS"]

_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_ID_ALPHABET[rem])
    return "".join(reversed(digits))


def new_id(taken: Optional[set[str]] = None, rng: Optional[random.Random] = None) -> str:
    """Generate a record id not present in taken, and reserve it there."""
    rng = rng or random.SystemRandom()
    while True:
        candidate = _base36(rng.getrandbits(32)) + _base36(rng.getrandbits(32))
        if taken is None:
            return candidate
        if candidate not in taken:
            taken.add(candidate)
            return candidate


def _unique_tags(tags: Iterable[str]) -> str:
    seen: list[str] = []
    for tag in tags:
        if tag not in seen:
            seen.append(tag)
    return ",".join(seen)


def sample_data(
    count: int = 32,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> list[ApplicationRecord]:
    """Synthesize a plausible set of applications from the last 60 days."""
    rng = rng or random.Random()
    today = today or date.today()
    taken: set[str] = set()
    rows = []
    for _ in range(count):
        applied = today - timedelta(days=rng.randrange(60))
        rows.append(
            ApplicationRecord(
                id=new_id(taken, rng),
                company=rng.choice(COMPANIES),
                role=rng.choice(ROLES),
                location=rng.choice(LOCATIONS),
                status=rng.choice(STATUSES),
                vibe=rng.choice(VIBES),
                fit=round(70 + rng.random() * 30),
                tags=_unique_tags([rng.choice(TAGS_POOL), rng.choice(TAGS_POOL)]),
                notes="Auto-generated sample",
                applied=applied.isoformat(),
            )
        )
    return rows
