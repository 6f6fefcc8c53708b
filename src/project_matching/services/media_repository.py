"""Storage contract for media items and an in-memory implementation."""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..models import AnalysisResult, AnalysisStatistics, AnalysisStatus, MediaItem
from ..utils.error_handling import ItemNotFoundError

logger = logging.getLogger(__name__)


class MediaRepository(ABC):
    """
    Storage operations the matching core depends on.

    Status changes go through `compare_and_set_status`, `record_analysis`
    and `record_failure` only, so the analysis lifecycle has a single
    mutation path.
    """

    @abstractmethod
    def add(self, item: MediaItem) -> MediaItem:
        """Store a new item."""

    @abstractmethod
    def get(self, item_id: str) -> Optional[MediaItem]:
        """Fetch an item by ID, or None."""

    @abstractmethod
    def delete(self, item_id: str) -> bool:
        """Delete an item; returns whether it existed."""

    @abstractmethod
    def list_by_owner(
        self,
        owner_id: str,
        status: Optional[AnalysisStatus] = None,
        newest_first: bool = False,
        limit: Optional[int] = None
    ) -> List[MediaItem]:
        """List one owner's items."""

    @abstractmethod
    def list_analyzed(
        self,
        exclude_item_id: Optional[str] = None,
        exclude_owner_id: Optional[str] = None
    ) -> List[MediaItem]:
        """List complete items, optionally excluding one item or owner."""

    @abstractmethod
    def compare_and_set_status(
        self,
        item_id: str,
        expected: Iterable[AnalysisStatus],
        new_status: AnalysisStatus
    ) -> bool:
        """Atomically move an item to new_status if its status is expected."""

    @abstractmethod
    def record_analysis(self, item_id: str, result: AnalysisResult) -> MediaItem:
        """Mark a running item complete with its derived fields."""

    @abstractmethod
    def record_failure(self, item_id: str, error: str) -> MediaItem:
        """Mark a running item failed."""

    def get_or_raise(self, item_id: str) -> MediaItem:
        """
        Fetch an item by ID.

        Raises:
            ItemNotFoundError: If no such item exists
        """
        item = self.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def status_counts(self, owner_id: str) -> AnalysisStatistics:
        """Count one owner's items per analysis status."""
        counts = {status.value: 0 for status in AnalysisStatus}
        items = self.list_by_owner(owner_id)
        for item in items:
            counts[item.status.value] += 1
        return AnalysisStatistics(total=len(items), **counts)


class InMemoryMediaRepository(MediaRepository):
    """
    Thread-safe in-process repository.

    Items are kept in insertion order and handed out as deep copies, so
    readers never observe a half-applied analysis.
    """

    def __init__(self, items: Optional[Iterable[MediaItem]] = None):
        self._items: Dict[str, MediaItem] = {}
        self._lock = threading.RLock()

        for item in items or []:
            self.add(item)

    def add(self, item: MediaItem) -> MediaItem:
        with self._lock:
            if item.id in self._items:
                raise ValueError(f"Media item {item.id} already exists")
            self._items[item.id] = item.model_copy(deep=True)
        return item

    def get(self, item_id: str) -> Optional[MediaItem]:
        with self._lock:
            item = self._items.get(item_id)
            return item.model_copy(deep=True) if item else None

    def delete(self, item_id: str) -> bool:
        with self._lock:
            return self._items.pop(item_id, None) is not None

    def list_by_owner(
        self,
        owner_id: str,
        status: Optional[AnalysisStatus] = None,
        newest_first: bool = False,
        limit: Optional[int] = None
    ) -> List[MediaItem]:
        with self._lock:
            items = [
                item.model_copy(deep=True)
                for item in self._items.values()
                if item.owner_id == owner_id
                and (status is None or item.status == status)
            ]

        if newest_first:
            items.sort(key=lambda item: item.uploaded_at, reverse=True)

        return items[:limit] if limit is not None else items

    def list_analyzed(
        self,
        exclude_item_id: Optional[str] = None,
        exclude_owner_id: Optional[str] = None
    ) -> List[MediaItem]:
        with self._lock:
            return [
                item.model_copy(deep=True)
                for item in self._items.values()
                if item.status == AnalysisStatus.COMPLETE
                and item.id != exclude_item_id
                and (exclude_owner_id is None or item.owner_id != exclude_owner_id)
            ]

    def compare_and_set_status(
        self,
        item_id: str,
        expected: Iterable[AnalysisStatus],
        new_status: AnalysisStatus
    ) -> bool:
        expected = set(expected)

        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)
            if item.status not in expected:
                return False

            updates = {"status": new_status}
            if new_status != AnalysisStatus.COMPLETE:
                updates.update(self._cleared_fields())
            self._items[item_id] = item.model_copy(update=updates)

        logger.debug(f"Item {item_id}: {item.status.value} -> {new_status.value}")
        return True

    def record_analysis(self, item_id: str, result: AnalysisResult) -> MediaItem:
        with self._lock:
            item = self._require_running(item_id)
            updated = MediaItem.model_validate({
                **item.model_dump(),
                "status": AnalysisStatus.COMPLETE,
                "transcript": result.transcript,
                "keywords": [keyword.model_dump() for keyword in result.keywords],
                "summary": result.summary,
                "embedding": list(result.embedding),
                "quality_score": result.quality_score,
                "named_entities": [entity.model_dump() for entity in result.named_entities],
                "analyzed_at": datetime.now(timezone.utc),
                "analysis_error": None
            })
            self._items[item_id] = updated
            return updated.model_copy(deep=True)

    def record_failure(self, item_id: str, error: str) -> MediaItem:
        with self._lock:
            item = self._require_running(item_id)
            updated = item.model_copy(update={
                "status": AnalysisStatus.FAILED,
                "analyzed_at": datetime.now(timezone.utc),
                "analysis_error": error,
                **self._cleared_fields()
            })
            self._items[item_id] = updated
            return updated.model_copy(deep=True)

    def _require_running(self, item_id: str) -> MediaItem:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        if item.status != AnalysisStatus.RUNNING:
            raise ValueError(
                f"Media item {item_id} is {item.status.value}, expected running"
            )
        return item

    @staticmethod
    def _cleared_fields() -> dict:
        return {
            "transcript": None,
            "keywords": None,
            "summary": None,
            "embedding": None,
            "quality_score": None,
            "named_entities": None
        }
