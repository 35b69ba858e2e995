"""Record store: the in-memory application list and its persistence slot."""

import json
import logging
import random
from typing import Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from .csv_codec import import_csv_text
from .errors import PersistenceError
from .models import ApplicationRecord
from .sample import sample_data
from .storage import SqliteSlot

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "jst-pro-data-v1"

_records_adapter = TypeAdapter(list[ApplicationRecord])


class RecordStore:
    """Ordered list of application records persisted under one slot key.

    The list is always persisted wholesale; there is no per-record update.
    """

    def __init__(
        self,
        slot: SqliteSlot,
        key: str = DEFAULT_STORAGE_KEY,
        sample_size: int = 34,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.slot = slot
        self.key = key
        self.sample_size = sample_size
        self._rng = rng
        self._records: list[ApplicationRecord] = []

    @property
    def records(self) -> list[ApplicationRecord]:
        """Snapshot of the records in display order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def taken_ids(self) -> set[str]:
        """Ids already assigned to records in the store."""
        return {record.id for record in self._records}

    def load(self) -> list[ApplicationRecord]:
        """Load records from the slot, seeding sample data if it is missing or unreadable.

        A failed read is treated like a missing slot, so the sample set is
        written over whatever the slot held. Intact data behind a transient
        read error (a locked database, say) is lost in that case.
        """
        try:
            raw = self.slot.read(self.key)
            if raw is not None:
                self._records = _records_adapter.validate_json(raw)
                logger.info(f"Loaded {len(self._records)} records from slot {self.key!r}")
                return self.records
            logger.info(f"Slot {self.key!r} is empty, seeding sample data")
        except PersistenceError as e:
            logger.warning(f"Could not read slot {self.key!r}: {e}")
        except ValidationError as e:
            logger.warning(
                f"Discarding unreadable data in slot {self.key!r} "
                f"({e.error_count()} errors)"
            )

        data = sample_data(self.sample_size, rng=self._rng)
        try:
            self.save(data)
        except PersistenceError as e:
            logger.warning(f"Could not persist sample data: {e}")
            self._records = data
        return self.records

    def save(self, records: Optional[Iterable[ApplicationRecord]] = None) -> None:
        """Overwrite the slot with the full record list."""
        if records is not None:
            records = list(records)
        else:
            records = self._records
        payload = json.dumps(
            [record.model_dump(mode="json") for record in records],
            ensure_ascii=False,
        )
        self.slot.write(self.key, payload)
        self._records = records
        logger.debug(f"Saved {len(records)} records to slot {self.key!r}")

    def prepend_imported(self, new_records: Iterable[ApplicationRecord]) -> list[ApplicationRecord]:
        """Place new records ahead of the existing ones and persist the result."""
        new_records = list(new_records)
        self.save(new_records + self._records)
        logger.info(f"Imported {len(new_records)} records, store now holds {len(self)}")
        return new_records

    def import_csv(self, text: str) -> list[ApplicationRecord]:
        """Import CSV text into the store.

        Raises FormatError before touching the store if the header is unusable.
        """
        imported = import_csv_text(text, taken_ids=self.taken_ids())
        return self.prepend_imported(imported)
