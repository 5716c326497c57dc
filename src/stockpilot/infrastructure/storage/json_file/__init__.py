"""JSON document-file storage."""

from stockpilot.infrastructure.storage.json_file.store import JsonFileInventoryStore

__all__ = ["JsonFileInventoryStore"]
