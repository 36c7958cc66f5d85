"""
Search history and saved-query store
Keeps a capped, deduplicated history log plus named bookmarks, persisted as durable records
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..cache.config import CacheConfig
from ..cache.manager import CacheManager
from ..models.search import HistoryEntry, SavedQuery, SearchFilters, SearchScope, SortMode
from ..search.config import SearchConfig
from ..search.normalizer import normalize_text

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _parse_record(raw: Any, model: Type[RecordT]) -> List[RecordT]:
    """Best-effort parse of a stored record; anything unusable is dropped"""
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning(f"Ignoring malformed {model.__name__} record of type {type(raw).__name__}")
        return []

    parsed = []
    for item in raw:
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {model.__name__} entry: {e.error_count()} errors")
    return parsed


class SearchHistoryStore:
    """Most-recent-first history log and named saved queries for one user context"""

    def __init__(
        self,
        cache_manager: CacheManager,
        capacity: int = SearchConfig.HISTORY_CAPACITY,
        history_key: str = CacheConfig.HISTORY_RECORD_KEY,
        saved_key: str = CacheConfig.SAVED_RECORD_KEY,
    ):
        self.cache_manager = cache_manager
        self.capacity = max(0, capacity)
        self.history_key = history_key
        self.saved_key = saved_key
        self.history: List[HistoryEntry] = []
        self.saved: List[SavedQuery] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        """Read both durable records; nothing is written before this has run"""
        self.history = _parse_record(self.cache_manager.read_record(self.history_key), HistoryEntry)
        self.history = self.history[: self.capacity]
        self.saved = _parse_record(self.cache_manager.read_record(self.saved_key), SavedQuery)
        self._loaded = True
        logger.debug(f"History store loaded: {len(self.history)} history, {len(self.saved)} saved")

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _persist_history(self) -> None:
        if not self._loaded:
            return
        payload = [entry.model_dump(mode="json") for entry in self.history]
        if not self.cache_manager.write_record(self.history_key, payload):
            logger.warning("History not persisted; keeping in-memory state")

    def _persist_saved(self) -> None:
        if not self._loaded:
            return
        payload = [entry.model_dump(mode="json") for entry in self.saved]
        if not self.cache_manager.write_record(self.saved_key, payload):
            logger.warning("Saved queries not persisted; keeping in-memory state")

    # History
    def get_history(self) -> List[HistoryEntry]:
        self._ensure_loaded()
        return list(self.history)

    def record_execution(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        sort: SortMode = SortMode.RELEVANCE,
        result_counts: Optional[Dict[str, int]] = None,
    ) -> HistoryEntry:
        """Prepend an executed search, replacing any entry with the same normalized text"""
        self._ensure_loaded()

        entry = HistoryEntry(
            id=f"h_{uuid.uuid4().hex[:12]}",
            query=query,
            filters=filters or SearchFilters(),
            sort=sort,
            executed_at=datetime.now(timezone.utc),
            result_counts=result_counts or {},
        )

        key = normalize_text(query)
        remaining = [item for item in self.history if normalize_text(item.query) != key]
        self.history = ([entry] + remaining)[: self.capacity]

        self._persist_history()
        return entry

    def remove_history_entry(self, entry_id: str) -> bool:
        self._ensure_loaded()
        remaining = [item for item in self.history if item.id != entry_id]
        if len(remaining) == len(self.history):
            return False
        self.history = remaining
        self._persist_history()
        return True

    def clear_history(self) -> None:
        """Empty the log and drop its durable record"""
        self._ensure_loaded()
        self.history = []
        if not self.cache_manager.delete_record(self.history_key):
            logger.debug("History record delete reported nothing removed")

    # Saved queries
    def get_saved(self) -> List[SavedQuery]:
        self._ensure_loaded()
        return list(self.saved)

    def find_saved(self, query: str, kind: SearchScope) -> Optional[SavedQuery]:
        self._ensure_loaded()
        key = normalize_text(query)
        for entry in self.saved:
            if entry.kind == kind and normalize_text(entry.query) == key:
                return entry
        return None

    def is_saved(self, query: str, kind: SearchScope = SearchScope.ALL) -> bool:
        return self.find_saved(query, kind) is not None

    def toggle_saved(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        sort: SortMode = SortMode.RELEVANCE,
        name: Optional[str] = None,
    ) -> Optional[SavedQuery]:
        """
        Save a search, or unsave it when the same query and kind is already saved

        Returns:
            The new SavedQuery, or None when an existing one was removed
        """
        self._ensure_loaded()
        filters = filters or SearchFilters()

        existing = self.find_saved(query, filters.kind)
        if existing is not None:
            self.saved = [entry for entry in self.saved if entry.id != existing.id]
            self._persist_saved()
            logger.info(f"Unsaved query '{existing.query}' ({existing.kind.value})")
            return None

        trimmed = (query or "").strip()
        entry = SavedQuery(
            id=f"s_{uuid.uuid4().hex[:12]}",
            name=(name or "").strip() or trimmed,
            query=trimmed,
            kind=filters.kind,
            filters=filters,
            sort=sort,
            created_at=datetime.now(timezone.utc),
        )
        self.saved.append(entry)
        self._persist_saved()
        logger.info(f"Saved query '{entry.query}' ({entry.kind.value})")
        return entry

    def rename_saved(self, saved_id: str, name: str) -> Optional[SavedQuery]:
        self._ensure_loaded()
        for index, entry in enumerate(self.saved):
            if entry.id == saved_id:
                renamed = entry.model_copy(update={"name": (name or "").strip() or entry.name})
                self.saved[index] = renamed
                self._persist_saved()
                return renamed
        return None

    def delete_saved(self, saved_id: str) -> bool:
        self._ensure_loaded()
        remaining = [entry for entry in self.saved if entry.id != saved_id]
        if len(remaining) == len(self.saved):
            return False
        self.saved = remaining
        self._persist_saved()
        return True
