"""Branch and pull request aware build history."""

from .store import HistoryStore, JobKey, RecordResult, create_object_store

__all__ = ["HistoryStore", "JobKey", "RecordResult", "create_object_store"]
