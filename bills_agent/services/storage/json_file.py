"""
JSON File Storage Implementation

DESIGN DECISION: A single local JSON document is the storage backend:
1. Single-user household tool - no database setup required
2. Users can open, back up, or hand-edit their data directly
3. The schema is tiny and stable

TRADEOFFS:
- The whole document is read before every operation and rewritten after
  every mutation; there is no write buffering
- No locking: concurrent requests touching the same bill race and the
  last write wins. Acceptable for a single-user local tool
- Schema evolution is default-on-read (see Bill); there are no migrations

The implementation follows the abstract interface, so we can swap
to SQLite later without changing request handling.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import ValidationError

from bills_agent.aggregation import decorate_bills, summarize_month
from bills_agent.config import get_settings
from bills_agent.models.bill import (
    Bill,
    BillsDocument,
    BillWithStatus,
    MonthlySummary,
)
from bills_agent.models.month import MonthKey
from bills_agent.services.storage.interface import (
    BillStorageInterface,
    MonthLike,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileBillStorage(BillStorageInterface):
    """
    File-backed bill store.

    Owns its backing file exclusively. Every public operation loads the
    latest document from disk; every mutation saves it back in full.
    The file is created on first write.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path) if path else get_settings().storage.data_path

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def _load(self) -> BillsDocument:
        """Read and decode the whole document."""
        if not self._path.exists():
            return BillsDocument()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e
        if not raw.strip():
            return BillsDocument()
        try:
            return BillsDocument.model_validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Corrupt bills file {self._path}: {e}") from e

    def _save(self, document: BillsDocument) -> None:
        """Overwrite the document atomically (write temp file, then rename)."""
        payload = document.model_dump(mode="json", by_alias=True)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(payload, fh, indent=2)
                    fh.write("\n")
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self._path}: {e}") from e

    # ------------------------------------------------------------------
    # Bills
    # ------------------------------------------------------------------

    async def list_bills(self) -> list[Bill]:
        return self._load().bills

    async def list_bills_with_status(self, month: MonthLike) -> list[BillWithStatus]:
        key = MonthKey.parse(month)
        document = self._load()
        return decorate_bills(document.bills, key, document.paid_ids(str(key)))

    async def get_bill(self, bill_id: str) -> Optional[Bill]:
        return self._load().find(bill_id)

    async def upsert_bill(self, bill: Bill) -> Bill:
        document = self._load()
        existing = document.find(bill.id)

        if existing is None:
            stored = bill
            document.bills.append(stored)
        else:
            stored = existing.model_copy(
                update=bill.model_dump(exclude_unset=True)
            )
            index = document.bills.index(existing)
            document.bills[index] = stored

        self._save(document)
        logger.debug(
            "bill_upserted",
            bill_id=stored.id,
            created=existing is None,
            path=str(self._path),
        )
        return stored

    async def delete_bill(self, bill_id: str) -> bool:
        document = self._load()
        remaining = [bill for bill in document.bills if bill.id != bill_id]
        removed = len(remaining) != len(document.bills)
        document.bills = remaining

        purged = False
        for month in list(document.paid_status):
            if document.paid_status[month].pop(bill_id, None) is not None:
                purged = True
            if not document.paid_status[month]:
                del document.paid_status[month]

        if removed or purged:
            self._save(document)
        return removed

    # ------------------------------------------------------------------
    # Paid status
    # ------------------------------------------------------------------

    async def set_paid_status(
        self,
        month: MonthLike,
        bill_id: str,
        is_paid: bool,
    ) -> bool:
        key = str(MonthKey.parse(month))
        document = self._load()

        if is_paid:
            document.paid_status.setdefault(key, {})[bill_id] = True
        else:
            month_status = document.paid_status.get(key, {})
            month_status.pop(bill_id, None)
            if not month_status:
                document.paid_status.pop(key, None)

        self._save(document)
        return bill_id in document.paid_ids(key)

    async def get_paid_bill_ids(self, month: MonthLike) -> set[str]:
        key = str(MonthKey.parse(month))
        return self._load().paid_ids(key)

    async def get_monthly_summary(self, month: MonthLike) -> MonthlySummary:
        key = MonthKey.parse(month)
        document = self._load()
        return summarize_month(document.bills, key, document.paid_ids(str(key)))
