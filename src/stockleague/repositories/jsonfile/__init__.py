"""JSON file repository backend."""

from stockleague.repositories.jsonfile.record_store import JsonFileRecordStore

__all__ = ["JsonFileRecordStore"]
