"""CSV export and import of application records.

Export quotes every field. Import is deliberately lenient: the tokenizer
never rejects malformed quoting, it keeps whatever text it can recover.
Only a missing or single-column header row is an error.

Line endings: export joins rows with ``\\n`` and writes no trailing newline.
Import accepts ``\\n``, ``\\r\\n`` and bare ``\\r`` outside quoted fields,
blank lines, and a leading byte-order mark.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from pydantic import BaseModel

from .errors import FormatError
from .models import ApplicationRecord, ApplicationStatus
from .sample import new_id

logger = logging.getLogger(__name__)

HEADERS = [
    "Company",
    "Role",
    "Location",
    "Status",
    "Vibe",
    "Fit Score",
    "Tags",
    "Notes",
    "Applied Date",
]

# Record field -> header names accepted on import, in priority order
FIELD_ALIASES = {
    "company": ("Company",),
    "role": ("Role", "Role Title"),
    "location": ("Location",),
    "status": ("Status",),
    "vibe": ("Vibe",),
    "fit": ("Fit Score",),
    "tags": ("Tags",),
    "notes": ("Notes",),
    "applied": ("Applied Date",),
}

DEFAULT_LOCATION = "Remote"


class ParsedCSV(BaseModel):
    """Header index and data rows of an imported CSV document."""

    header: dict[str, int]
    rows: list[list[str]]


def _quote(value: Optional[object]) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def serialize(records: Iterable[ApplicationRecord]) -> str:
    """Render records as CSV text with a header row."""
    lines = [",".join(HEADERS)]
    for record in records:
        lines.append(",".join(_quote(value) for value in record.to_row()))
    return "\n".join(lines)


class _State(Enum):
    FIELD_START = "field_start"
    IN_QUOTED = "in_quoted"
    IN_UNQUOTED = "in_unquoted"
    AFTER_QUOTE = "after_quote"


def tokenize(text: str) -> list[list[str]]:
    """Split CSV text into rows of fields."""
    if text.startswith("\ufeff"):
        text = text[1:]

    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    state = _State.FIELD_START
    i = 0
    n = len(text)

    def end_field() -> None:
        row.append("".join(field))
        field.clear()

    def end_row() -> None:
        nonlocal row
        rows.append(row)
        row = []

    while i < n:
        ch = text[i]

        if ch == "\r" and state is not _State.IN_QUOTED:
            # \r\n and bare \r both end the row
            if i + 1 < n and text[i + 1] == "\n":
                i += 1
            ch = "\n"

        if state is _State.FIELD_START:
            if ch == '"':
                state = _State.IN_QUOTED
            elif ch == ",":
                end_field()
            elif ch == "\n":
                # a line break right at the start of a row is a blank line
                if row:
                    end_field()
                    end_row()
            else:
                field.append(ch)
                state = _State.IN_UNQUOTED

        elif state is _State.IN_UNQUOTED:
            if ch == ",":
                end_field()
                state = _State.FIELD_START
            elif ch == "\n":
                end_field()
                end_row()
                state = _State.FIELD_START
            else:
                # stray quotes are kept as literal text
                field.append(ch)

        elif state is _State.IN_QUOTED:
            if ch == '"':
                state = _State.AFTER_QUOTE
            else:
                field.append(ch)

        else:  # AFTER_QUOTE
            if ch == '"':
                field.append('"')
                state = _State.IN_QUOTED
            elif ch == ",":
                end_field()
                state = _State.FIELD_START
            elif ch == "\n":
                end_field()
                end_row()
                state = _State.FIELD_START
            else:
                # text after a closing quote joins the same field
                field.append(ch)
                state = _State.IN_UNQUOTED

        i += 1

    if state is not _State.FIELD_START or row:
        # flush the last row; an unterminated quoted field ends here
        end_field()
        end_row()

    return rows


def index_header(header: Sequence[str]) -> dict[str, int]:
    """Map trimmed header names to their column index."""
    return {name.strip(): idx for idx, name in enumerate(header)}


def parse(text: str) -> ParsedCSV:
    """Tokenize CSV text and split it into header index and data rows."""
    rows = tokenize(text)
    if not rows or len(rows[0]) < 2:
        raise FormatError("Invalid CSV: expected a header row with at least 2 columns")
    header, *data = rows
    return ParsedCSV(header=index_header(header), rows=[r for r in data if r])


def parse_header(text: str) -> dict[str, int]:
    """Return the header index of CSV text."""
    return parse(text).header


def parse_rows(text: str) -> list[list[str]]:
    """Return the data rows of CSV text."""
    return parse(text).rows


def _lookup(row: Sequence[str], header: dict[str, int], aliases: Sequence[str]) -> Optional[str]:
    """First non-empty value among the alias columns.

    Returns None when no alias column reaches into this row, and "" when a
    column is present but empty.
    """
    found: Optional[str] = None
    for alias in aliases:
        idx = header.get(alias)
        if idx is None or idx >= len(row):
            continue
        if row[idx]:
            return row[idx]
        found = ""
    return found


def _parse_fit(value: Optional[str]) -> int:
    if not value:
        return 0
    try:
        fit = int(value.strip())
    except ValueError:
        try:
            fit = int(float(value))
        except (ValueError, OverflowError):
            return 0
    return max(fit, 0)


def import_rows(
    header: dict[str, int],
    raw_rows: Iterable[Sequence[str]],
    taken_ids: Optional[set[str]] = None,
) -> list[ApplicationRecord]:
    """Build records from raw CSV rows, applying import defaults.

    Every record gets a fresh id that is not in taken_ids; generated ids are
    added to that set.
    """
    taken = taken_ids if taken_ids is not None else set()
    records = []
    for row in raw_rows:
        if not row:
            continue
        values = {
            name: _lookup(row, header, aliases)
            for name, aliases in FIELD_ALIASES.items()
        }
        location = values["location"]
        records.append(
            ApplicationRecord(
                id=new_id(taken),
                company=values["company"] or "",
                role=values["role"] or "",
                location=DEFAULT_LOCATION if location is None else location,
                status=ApplicationStatus.coerce(values["status"]),
                vibe=values["vibe"] or "",
                fit=_parse_fit(values["fit"]),
                tags=values["tags"] or "",
                notes=values["notes"] or "",
                applied=values["applied"] or "",
            )
        )
    return records


def import_csv_text(text: str, taken_ids: Optional[set[str]] = None) -> list[ApplicationRecord]:
    """Parse CSV text and build records from every data row."""
    parsed = parse(text)
    records = import_rows(parsed.header, parsed.rows, taken_ids)
    logger.info(f"Decoded {len(records)} records from {len(parsed.rows)} CSV rows")
    return records


def export_csv(records: Sequence[ApplicationRecord], path: Union[str, Path]) -> Path:
    """Write records to a UTF-8 CSV file."""
    out = Path(path)
    with open(out, "w", newline="", encoding="utf-8") as f:
        f.write(serialize(records))
    logger.info(f"Wrote {len(records)} rows to {out}")
    return out


def read_csv(path: Union[str, Path]) -> str:
    """Read a CSV file fully into memory, line endings untouched."""
    with open(path, "r", newline="", encoding="utf-8-sig") as f:
        return f.read()
