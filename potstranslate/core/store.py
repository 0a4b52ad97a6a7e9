"""
Key-Value Store Module

Persistence for dictionaries, the translation cache and the review sinks.
Every store maps strings to strings and has an explicit lifecycle:

- load(): read the whole store, never raising for bad content
- save(): replace the whole store
- update(): read the whole store, set one key, write it back

A JSON file that is missing, unreadable or not an object of strings loads
as empty and reports why through StoreLoadResult.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from potstranslate.logger import get_logger

logger = get_logger(__name__)


class StoreStatus(str, Enum):
    LOADED = "loaded"
    MISSING = "missing"
    MALFORMED = "malformed"


@dataclass
class StoreLoadResult:
    """Outcome of reading a store."""
    data: Dict[str, str] = field(default_factory=dict)
    status: StoreStatus = StoreStatus.LOADED
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != StoreStatus.MALFORMED


class KeyValueStore:
    """Interface shared by all stores."""

    name = "store"

    def load(self) -> StoreLoadResult:
        raise NotImplementedError

    def save(self, data: Mapping[str, str]) -> None:
        raise NotImplementedError

    def update(self, key: str, value: str) -> Dict[str, str]:
        """Read the full store, set one key and persist it. Returns the new content."""
        data = dict(self.load().data)
        data[key] = value
        self.save(data)
        return data


class MemoryStore(KeyValueStore):
    """Store kept in memory; used when no file is configured and in tests."""

    def __init__(self, data: Optional[Mapping[str, str]] = None, name: str = "memory"):
        self.name = name
        self._data: Dict[str, str] = dict(data or {})
        self.save_count = 0

    def load(self) -> StoreLoadResult:
        return StoreLoadResult(data=dict(self._data))

    def save(self, data: Mapping[str, str]) -> None:
        self._data = dict(data)
        self.save_count += 1


def _validate_mapping(raw) -> Dict[str, str]:
    if not isinstance(raw, dict):
        raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
    for key, value in raw.items():
        if not isinstance(value, str):
            raise ValueError(f"value for {key!r} is {type(value).__name__}, expected string")
    return dict(raw)


class JsonFileStore(KeyValueStore):
    """Store persisted as one pretty-printed JSON object."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.name = self.path.name

    def load(self) -> StoreLoadResult:
        if not self.path.exists():
            logger.debug(f"Store {self.path} does not exist, starting empty")
            return StoreLoadResult(status=StoreStatus.MISSING)

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            data = _validate_mapping(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Store {self.path} is unreadable or malformed ({e}), treating it as empty")
            return StoreLoadResult(status=StoreStatus.MALFORMED, error=str(e))

        logger.debug(f"Loaded {len(data)} entries from {self.path}")
        return StoreLoadResult(data=data)

    def save(self, data: Mapping[str, str]) -> None:
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(dict(data), f, indent=2, ensure_ascii=False)


def open_store(path: Optional[Union[str, Path]], name: str = "memory") -> KeyValueStore:
    """JSON file store for a path, memory store when no path is configured."""
    if path is None or str(path) == "":
        return MemoryStore(name=name)
    return JsonFileStore(path)
