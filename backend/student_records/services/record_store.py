"""
Record Store - JSON-file backed collection of student records.

The whole collection lives in one JSON array that is:
1. Read in full before every operation
2. Rewritten in full after every mutation (temp file + os.replace)
3. Mutated only inside a single asyncio.Lock critical section

The lock makes every create/register/update/delete an atomic
read-modify-write: no two mutations can read the same snapshot, so
concurrent creates never compute the same next id and no update is lost.
Reads skip the lock; atomic replaces mean they always see a whole file.

File I/O runs in a worker thread so a slow disk does not stall the
event loop for requests that never touch the store.
"""

import asyncio
import json
import os
import time
from pathlib import Path
from typing import Callable, List, Optional

from student_records.errors import DuplicateLogin, ImmutableField, NotFound, StorageFailure
from student_records.logging_config import get_logger, log_with_context

# Channel logger for storage operations
logger = get_logger("store")


def atomic_write(file_path: str, data) -> None:
    """Write JSON to a temp file next to the target, then swap it in."""
    tmp_path = file_path + ".tmp"
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, file_path)
    except (OSError, TypeError, ValueError):
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def _read_records(file_path: str) -> List[dict]:
    with open(file_path, "r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError("expected a JSON array of records, got {}".format(type(records).__name__))
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError("record at position {} is {}, not an object".format(
                position, type(record).__name__))
    return records


class RecordStore:
    """Owns the persisted student collection and serializes its mutations."""

    def __init__(self, file_path: str):
        self.file_path = str(file_path)
        self._lock = asyncio.Lock()
        # Highest id handed out by this store; keeps ids from being
        # reused after the newest record is deleted
        self._last_id = 0
        self._ensure_initialized()

    def _ensure_initialized(self) -> None:
        """Create the data directory and an empty collection if missing."""
        Path(self.file_path).parent.mkdir(parents=True, exist_ok=True)
        if not os.path.exists(self.file_path):
            atomic_write(self.file_path, [])
            log_with_context(logger, "INFO", "Initialized empty student store",
                             extra_data={"file": self.file_path})

    # ── raw I/O ──────────────────────────────────────────────

    async def _load(self) -> List[dict]:
        try:
            return await asyncio.to_thread(_read_records, self.file_path)
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            log_with_context(logger, "ERROR", "Error reading students data",
                             extra_data={"file": self.file_path, "error": str(e)},
                             exc_info=True)
            raise StorageFailure() from e

    async def _save(self, records: List[dict]) -> None:
        try:
            await asyncio.to_thread(atomic_write, self.file_path, records)
        except (OSError, TypeError, ValueError) as e:
            log_with_context(logger, "ERROR", "Error writing students data",
                             extra_data={"file": self.file_path, "error": str(e)},
                             exc_info=True)
            raise StorageFailure() from e

    def _next_id(self, records: List[dict]) -> int:
        ids = [r["id"] for r in records if isinstance(r.get("id"), int)]
        return max(ids + [self._last_id]) + 1

    @staticmethod
    def _index_of(records: List[dict], student_id: int) -> int:
        for i, record in enumerate(records):
            if record.get("id") == student_id:
                return i
        return -1

    # ── reads ────────────────────────────────────────────────

    async def list(self) -> List[dict]:
        """Return every record in insertion order, or [] if storage is unreadable."""
        try:
            return await self._load()
        except StorageFailure:
            return []

    async def get(self, student_id: int) -> dict:
        records = await self._load()
        index = self._index_of(records, student_id)
        if index == -1:
            raise NotFound()
        return records[index]

    async def find(self, predicate: Callable[[dict], bool]) -> Optional[dict]:
        """Return the first record matching predicate, or None."""
        records = await self._load()
        return next((r for r in records if predicate(r)), None)

    # ── mutations ────────────────────────────────────────────

    async def create(self, fields: dict) -> dict:
        """
        Append a new record built from fields and return it.

        A client-supplied id is ignored; the store always assigns one.
        """
        start_time = time.time()
        async with self._lock:
            records = await self._load()
            record = {"id": self._next_id(records)}
            record.update({k: v for k, v in fields.items() if k != "id"})
            records.append(record)
            await self._save(records)
            self._last_id = record["id"]

        log_with_context(logger, "INFO", "Student {} created".format(record["id"]),
                         context={"student_id": record["id"]},
                         extra_data={"duration_ms": round((time.time() - start_time) * 1000, 2)})
        return record

    async def register(self, login: str, password: str, fullName: Optional[str] = None,
                       phone: Optional[str] = None, studentId: Optional[str] = None) -> dict:
        """
        Create an account after checking that the login is free.

        The uniqueness check and the append share one critical section,
        so two concurrent registrations with the same login cannot both pass.
        """
        async with self._lock:
            records = await self._load()
            if any(r.get("login") == login for r in records):
                log_with_context(logger, "WARNING", "Registration rejected: login already taken",
                                 context={"login": login})
                raise DuplicateLogin()

            record = {
                "id": self._next_id(records),
                "login": login,
                "password": password,
                "fullName": fullName,
                "phone": phone,
                "studentId": studentId,
            }
            records.append(record)
            await self._save(records)
            self._last_id = record["id"]

        log_with_context(logger, "INFO", "Student {} registered".format(record["id"]),
                         context={"student_id": record["id"], "login": login})
        return {"message": "Registration completed successfully", "success": True}

    async def update(self, student_id: int, fields: dict) -> dict:
        """Shallow-merge fields onto an existing record; supplied keys win."""
        if "id" in fields and fields["id"] != student_id:
            raise ImmutableField()

        async with self._lock:
            records = await self._load()
            index = self._index_of(records, student_id)
            if index == -1:
                raise NotFound()

            updated = {**records[index], **fields}
            records[index] = updated
            await self._save(records)

        log_with_context(logger, "INFO", "Student {} updated".format(student_id),
                         context={"student_id": student_id},
                         extra_data={"fields": sorted(k for k in fields if k != "password")})
        return updated

    async def delete(self, student_id: int) -> dict:
        async with self._lock:
            records = await self._load()
            remaining = [r for r in records if r.get("id") != student_id]
            if len(remaining) == len(records):
                raise NotFound()
            await self._save(remaining)

        log_with_context(logger, "INFO", "Student {} deleted".format(student_id),
                         context={"student_id": student_id})
        return {"message": "Student deleted successfully"}
