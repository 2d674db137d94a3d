"""
Record store - the in-memory collection for one record kind, loaded from and
written back to the storage collaborator.

The stored JSON array is kept as loaded (malformed entries included) and each
mutation is written against a copy; memory only changes once the write has
succeeded, so a failed write leaves memory and storage as they were.
A payload that cannot be read at all loads as empty and blocks every write
until a later load succeeds.
"""

import copy
import json
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .errors import PersistenceError, StoreOutcome, ValidationError
from .schema import utc_now
from ..util.logging import logger


class RecordStore:
    """Ordered collection of one record kind."""

    def __init__(self, kind, storage):
        self.kind = kind
        self.storage = storage
        self._raw: List[Any] = []
        self._records: List[Any] = []
        self._positions: Dict[str, int] = {}  # record id -> index in self._raw
        self._unreadable = False

    @property
    def records(self) -> Tuple[Any, ...]:
        return tuple(self._records)

    @property
    def unreadable(self) -> bool:
        """The stored payload could not be read; writes would overwrite it."""
        return self._unreadable

    def __len__(self) -> int:
        return len(self._records)

    def load(self, now: datetime = None) -> Tuple[Any, ...]:
        """Read the stored collection; missing or unreadable data loads as empty."""
        now = now or utc_now()
        self._raw = self._read_raw()
        self._rebuild(now)
        logger.log_store_operation(self.kind.name, "load", details={"count": len(self._records)})
        return self.records

    def get(self, record_id: str) -> Optional[Any]:
        position = self._positions.get(record_id)
        if position is None:
            return None
        return next((r for r in self._records if r.id == record_id), None)

    def ids(self) -> set:
        return set(self._positions)

    def add(self, record) -> None:
        if record.id in self._positions:
            raise ValidationError("Duplicate ID", f"{record.id} already exists", field="id")

        raw = copy.deepcopy(self._raw)
        raw.append(record.to_dict())
        self._write(raw, "add", record.id)

        self._raw = raw
        self._positions[record.id] = len(raw) - 1
        self._records.append(record)

    def update(self, record_id: str, patch: Dict[str, Any]) -> StoreOutcome:
        """Apply `patch` to a record's mutable fields.

        Returns NOT_FOUND for an unknown id and NO_CHANGE when every patched
        field already holds the requested value; raises PersistenceError (with
        memory untouched) when the write fails.
        """
        self._check_patch(patch)

        position = self._positions.get(record_id)
        if position is None:
            logger.log_store_operation(self.kind.name, "update", record_id, status="not_found")
            return StoreOutcome.NOT_FOUND

        index, current = self._locate(record_id)
        if all(getattr(current, name) == value for name, value in patch.items()):
            return StoreOutcome.NO_CHANGE

        raw = copy.deepcopy(self._raw)
        for name, value in patch.items():
            raw[position][self.kind.mutable_fields[name]] = value
        self._write(raw, "update", record_id)

        self._raw = raw
        self._records[index] = replace(current, **patch)
        logger.log_store_operation(self.kind.name, "update", record_id, details=patch)
        return StoreOutcome.UPDATED

    def remove(self, record_id: str) -> StoreOutcome:
        position = self._positions.get(record_id)
        if position is None:
            return StoreOutcome.NOT_FOUND

        raw = copy.deepcopy(self._raw)
        del raw[position]
        self._write(raw, "remove", record_id)

        self._raw = raw
        self._records = [r for r in self._records if r.id != record_id]
        self._positions = {
            rid: (pos - 1 if pos > position else pos)
            for rid, pos in self._positions.items() if rid != record_id
        }
        logger.log_store_operation(self.kind.name, "remove", record_id)
        return StoreOutcome.REMOVED

    def _check_patch(self, patch: Dict[str, Any]) -> None:
        if not patch:
            raise ValidationError("Invalid Update", "Nothing to update")
        for name, value in patch.items():
            if name not in self.kind.mutable_fields:
                raise ValidationError("Invalid Update", f"{name} cannot be changed", field=name)
            if name == self.kind.discriminator and value not in self.kind.discriminator_values:
                raise ValidationError("Invalid Status", f"{value} is not a valid {name}", field=name)

    def _locate(self, record_id: str):
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index, record
        raise KeyError(record_id)

    def _read_raw(self) -> List[Any]:
        self._unreadable = False
        try:
            payload = self.storage.get(self.kind.storage_key)
        except PersistenceError as e:
            return self._mark_unreadable(f"Stored {self.kind.plural} could not be read: {e}")
        if not payload:
            return []
        try:
            data = json.loads(payload)
        except (TypeError, ValueError) as e:
            return self._mark_unreadable(f"Stored {self.kind.plural} are not valid JSON: {e}")
        if not isinstance(data, list):
            return self._mark_unreadable(f"Stored {self.kind.plural} are not a list")
        return data

    def _mark_unreadable(self, message: str) -> List[Any]:
        logger.error(f"{message}; showing none and refusing writes")
        self._unreadable = True
        return []

    def _rebuild(self, now: datetime) -> None:
        self._records = []
        self._positions = {}
        for position, raw in enumerate(self._raw):
            if not isinstance(raw, dict):
                logger.warning(f"Skipping malformed {self.kind.singular} at index {position}")
                continue
            record = self.kind.from_stored(raw, position, now)
            if record.id in self._positions:
                logger.warning(f"Skipping duplicate {self.kind.singular} id {record.id} at index {position}")
                continue
            self._positions[record.id] = position
            self._records.append(record)

    def _write(self, raw: List[Any], operation: str, record_id: str) -> None:
        if self._unreadable:
            logger.log_store_operation(self.kind.name, operation, record_id, status="failed",
                                       details={"error": "stored payload unreadable"})
            raise PersistenceError(f"Stored {self.kind.plural} are unreadable; refusing to overwrite them")
        try:
            self.storage.set(self.kind.storage_key, json.dumps(raw))
        except PersistenceError:
            logger.log_store_operation(self.kind.name, operation, record_id, status="failed")
            raise
        except Exception as e:
            logger.log_store_operation(self.kind.name, operation, record_id, status="failed",
                                       details={"error": str(e)})
            raise PersistenceError(f"Failed to persist {self.kind.plural}: {e}") from e
