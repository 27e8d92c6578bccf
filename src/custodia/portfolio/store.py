"""HoldingStore — the storage contract for holding records, plus an in-memory backend.

The workflow only talks to the ``HoldingStore`` protocol, so a persistent
backend can replace ``InMemoryHoldingStore`` without touching workflow logic.

Atomicity: ``compare_and_set`` is the only way the workflow mutates an
existing record. It reads the current status, checks it against the expected
one, and writes, all under one lock, so two racing reviewers can never both
win.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from custodia.core.exceptions import ConflictError

from .models import HoldingRecord, HoldingStatus


@runtime_checkable
class HoldingStore(Protocol):
    """Protocol for holding persistence.

    Implementations must hand out copies: mutating a returned record never
    changes stored state.
    """

    def next_id(self) -> str:
        """Reserve a fresh, never-reused holding id."""
        ...

    async def add(self, holding: HoldingRecord) -> HoldingRecord:
        """Insert a new record. Raises ConflictError if the id exists."""
        ...

    async def get(self, holding_id: str) -> HoldingRecord | None:
        ...

    async def list_holdings(
        self,
        *,
        statuses: Iterable[HoldingStatus] | None = None,
        owner_id: str | None = None,
    ) -> list[HoldingRecord]:
        ...

    async def compare_and_set(
        self,
        holding_id: str,
        expected_status: HoldingStatus,
        changes: dict[str, Any],
    ) -> HoldingRecord | None:
        """Apply *changes* only if the record exists and is in *expected_status*.

        Returns the updated record, or None when the record is missing or its
        status differs.
        """
        ...

    async def delete(self, holding_id: str) -> bool:
        """Delete a record. Returns True if it existed."""
        ...


class InMemoryHoldingStore:
    """Thread-safe, process-local HoldingStore."""

    def __init__(self, holdings: Iterable[HoldingRecord] = ()) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, HoldingRecord] = {}
        self._seq = 0
        for holding in holdings:
            self._records[holding.id] = replace(holding)

    def next_id(self) -> str:
        with self._lock:
            while True:
                self._seq += 1
                candidate = f"hld-{self._seq:06d}"
                if candidate not in self._records:
                    return candidate

    async def add(self, holding: HoldingRecord) -> HoldingRecord:
        with self._lock:
            if holding.id in self._records:
                raise ConflictError(f"Holding already exists: {holding.id}")
            self._records[holding.id] = replace(holding)
            return replace(holding)

    async def get(self, holding_id: str) -> HoldingRecord | None:
        with self._lock:
            record = self._records.get(holding_id)
            return replace(record) if record is not None else None

    async def list_holdings(
        self,
        *,
        statuses: Iterable[HoldingStatus] | None = None,
        owner_id: str | None = None,
    ) -> list[HoldingRecord]:
        wanted = {HoldingStatus(s) for s in statuses} if statuses is not None else None
        with self._lock:
            records = [replace(r) for r in self._records.values()]
        if wanted is not None:
            records = [r for r in records if r.status in wanted]
        if owner_id is not None:
            records = [r for r in records if r.owner_id == owner_id]
        return records

    async def compare_and_set(
        self,
        holding_id: str,
        expected_status: HoldingStatus,
        changes: dict[str, Any],
    ) -> HoldingRecord | None:
        with self._lock:
            current = self._records.get(holding_id)
            if current is None or current.status != expected_status:
                return None
            # replace() re-runs validation, so a bad edit never lands in the store
            updated = replace(current, **changes, updated=datetime.now().isoformat(timespec="seconds"))
            self._records[holding_id] = updated
            return replace(updated)

    async def delete(self, holding_id: str) -> bool:
        with self._lock:
            removed = self._records.pop(holding_id, None)
        if removed is not None:
            logger.debug(f"Deleted holding {holding_id} ({removed.status.value})")
        return removed is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
