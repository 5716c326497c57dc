"""
JSON document-file implementation of inventory storage.

All three collections live in one JSON document:

    {"warehouses": [...], "items": [...], "archived_reports": [...]}

A save rewrites the document through a temporary file and ``os.replace``, so
readers only ever see the previous or the new document. A file that cannot
be parsed loads as empty collections with a warning instead of failing, and
is copied aside before the next save overwrites it. Records that do not
parse are skipped on load and carried through unchanged on save.
"""

import asyncio
import json
import os
import shutil
import tempfile
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from stockpilot.config import get_logger
from stockpilot.core.entities.inventory import Item, Warehouse
from stockpilot.core.entities.report import ArchivedReport, archived_report_adapter
from stockpilot.core.exceptions import StorageFileError
from stockpilot.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)

WAREHOUSES = "warehouses"
ITEMS = "items"
ARCHIVED_REPORTS = "archived_reports"
COLLECTIONS = (WAREHOUSES, ITEMS, ARCHIVED_REPORTS)


class JsonFileInventoryStore(IInventoryStore):
    """Whole-collection storage in a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Create the data directory and an empty document if none exists."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                await asyncio.to_thread(self._write_document, {c: [] for c in COLLECTIONS})
                logger.info("json_store_created", path=str(self.path))
        except OSError as e:
            raise StorageFileError(str(self.path), "initialize", str(e)) from e

    # Warehouses

    async def load_warehouses(self) -> list[Warehouse]:
        records = await self._load_collection(WAREHOUSES)
        return self._parse_records(WAREHOUSES, records, Warehouse.model_validate)

    async def save_warehouses(self, warehouses: list[Warehouse]) -> None:
        await self._replace_collection(
            WAREHOUSES, [_dump(w) for w in warehouses], Warehouse.model_validate
        )

    # Items

    async def load_items(self) -> list[Item]:
        records = await self._load_collection(ITEMS)
        return self._parse_records(ITEMS, records, Item.model_validate)

    async def save_items(self, items: list[Item]) -> None:
        await self._replace_collection(ITEMS, [_dump(i) for i in items], Item.model_validate)

    # Archived reports

    async def load_archived_reports(self) -> list[ArchivedReport]:
        records = await self._load_collection(ARCHIVED_REPORTS)
        return self._parse_records(
            ARCHIVED_REPORTS, records, archived_report_adapter.validate_python
        )

    async def save_archived_reports(self, reports: list[ArchivedReport]) -> None:
        async with self._lock:
            document, intact = await asyncio.to_thread(self._read_document)
            stored = document.get(ARCHIVED_REPORTS, [])
            if not intact or not isinstance(stored, list):
                await self._set_aside("save_archived_reports")
                stored = stored if isinstance(stored, list) else []
            known = {r.get("id") for r in stored if isinstance(r, dict)}

            added = [_dump(r) for r in reports if r.id not in known]
            if not added:
                return
            document[ARCHIVED_REPORTS] = [*stored, *added]
            await self._write(document, "save_archived_reports")
        logger.debug("archived_reports_saved", inserted=len(added))

    # File handling

    async def _load_collection(self, name: str) -> list[Any]:
        async with self._lock:
            document, _ = await asyncio.to_thread(self._read_document)
        records = document.get(name, [])
        if not isinstance(records, list):
            logger.warning(
                "stored_data_malformed",
                path=str(self.path),
                collection=name,
                error="collection is not a list",
            )
            return []
        return records

    async def _replace_collection(
        self, name: str, records: list[dict], parse: Callable[[Any], Any]
    ) -> None:
        """
        Replace one collection, keeping stored records that do not parse.

        Unparseable records were skipped on load, so leaving them out of the
        saved list is not a removal. An unreadable document or collection is
        moved aside before it is overwritten.
        """
        async with self._lock:
            document, intact = await asyncio.to_thread(self._read_document)
            stored = document.get(name, [])
            if not intact or not isinstance(stored, list):
                await self._set_aside(f"save_{name}")
                stored = stored if isinstance(stored, list) else []

            saved_ids = {r["id"] for r in records}
            kept = [
                r
                for r in stored
                if not _parses(parse, r) and _record_id(r) not in saved_ids
            ]
            if kept:
                logger.warning(
                    "stored_data_preserved",
                    path=str(self.path),
                    collection=name,
                    record_ids=[_record_id(r) for r in kept],
                )
            document[name] = [*kept, *records]
            await self._write(document, f"save_{name}")
        logger.debug("collection_saved", collection=name, count=len(records))

    async def _set_aside(self, operation: str) -> None:
        """Move the current file to ``<name>.corrupt-<timestamp>``."""
        if not self.path.exists():
            return
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%f")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            await asyncio.to_thread(shutil.copy2, self.path, backup)
        except OSError as e:
            raise StorageFileError(str(self.path), operation, str(e)) from e
        logger.warning("stored_data_set_aside", path=str(self.path), backup=str(backup))

    async def _write(self, document: dict[str, Any], operation: str) -> None:
        try:
            await asyncio.to_thread(self._write_document, document)
        except OSError as e:
            raise StorageFileError(str(self.path), operation, str(e)) from e

    def _read_document(self) -> tuple[dict[str, Any], bool]:
        """Parsed document, and whether the file on disk was readable as one."""
        if not self.path.exists():
            return {c: [] for c in COLLECTIONS}, True
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageFileError(str(self.path), "read", str(e)) from e

        if not raw.strip():
            return {c: [] for c in COLLECTIONS}, True
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("stored_data_malformed", path=str(self.path), error=str(e))
            return {c: [] for c in COLLECTIONS}, False

        if not isinstance(document, dict):
            logger.warning(
                "stored_data_malformed",
                path=str(self.path),
                error="document is not an object",
            )
            return {c: [] for c in COLLECTIONS}, False
        return document, True

    def _write_document(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(document, tmp, ensure_ascii=False, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def _parse_records(self, name: str, records: list[Any], parse) -> list:
        parsed = []
        for record in records:
            try:
                parsed.append(parse(record))
            except PydanticValidationError as e:
                record_id = record.get("id") if isinstance(record, dict) else None
                logger.warning(
                    "stored_data_malformed",
                    path=str(self.path),
                    collection=name,
                    record_id=record_id,
                    error=str(e.errors()[:1]),
                )
        return parsed


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json")


def _record_id(record: Any) -> Any:
    return record.get("id") if isinstance(record, dict) else None


def _parses(parse: Callable[[Any], Any], record: Any) -> bool:
    try:
        parse(record)
    except PydanticValidationError:
        return False
    return True
