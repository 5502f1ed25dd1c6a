"""Recent city searches, persisted in a small key/value store."""
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from weather_data import City, deduplicate_cities

RECENT_SEARCHES_KEY = "recentSearches"
MAX_RECENT_SEARCHES = 5


class KeyValueStore(ABC):
    """Durable string key/value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class MemoryStore(KeyValueStore):
    """In-process store, used in tests and when nothing should touch disk."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object on disk.

    The file is rewritten on every set/delete; writes go through a temporary
    file and a rename so a crash never leaves a half-written file.
    """

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"Could not read {self.path}, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class RecentSearchList:
    """
    Most-recent-first list of cities the user picked.

    Holds at most five cities, never two with the same (name, state, country).
    Every change is written to the store immediately.
    """

    def __init__(self, store: KeyValueStore, max_items: int = MAX_RECENT_SEARCHES):
        self.store = store
        self.max_items = max_items
        self._items: List[City] = self._load()

    def _load(self) -> List[City]:
        raw = self.store.get(RECENT_SEARCHES_KEY)
        if not raw:
            return []
        try:
            cities = deduplicate_cities(City.from_dict(item) for item in json.loads(raw))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logging.error(f"Failed to load recent searches: {e}")
            try:
                self.store.delete(RECENT_SEARCHES_KEY)
            except OSError as delete_error:
                logging.error(f"Failed to remove corrupt recent searches: {delete_error}")
            return []
        return cities[:self.max_items]

    def _save(self) -> None:
        try:
            self.store.set(RECENT_SEARCHES_KEY, json.dumps([city.to_dict() for city in self._items]))
        except OSError as e:
            logging.error(f"Failed to save recent searches: {e}")

    def record(self, city: City) -> List[City]:
        """Move city to the front, dropping an older entry for the same place."""
        others = [c for c in self._items if c.identity != city.identity]
        self._items = [city] + others[:self.max_items - 1]
        self._save()
        return self.items()

    def items(self) -> List[City]:
        return list(self._items)

    def clear(self) -> None:
        self._items = []
        self._save()

    def __len__(self) -> int:
        return len(self._items)
