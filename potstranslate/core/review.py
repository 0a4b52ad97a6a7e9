"""
Review sinks and the error log.

Review sinks collect translations a human should look at:
- unchanged: the translator gave back the source text
- needs_review: the source holds characters outside the safe set

Both are keyed by the original text, so a recurring original keeps only
its latest translation. The error log is append-only and receives one JSON
line per string whose translation failed.
"""

import json
import traceback
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from potstranslate.core.store import KeyValueStore, MemoryStore
from potstranslate.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReviewRecord:
    original: str
    translation: str


class ReviewSink:
    """One review list persisted in a KeyValueStore."""

    def __init__(self, store: Optional[KeyValueStore] = None, name: str = "review"):
        self.store = store if store is not None else MemoryStore(name=name)
        self.name = name

    def record(self, original: str, translation: str) -> ReviewRecord:
        entry = ReviewRecord(original=original, translation=translation)
        try:
            self.store.update(original, translation)
        except OSError as e:
            logger.error(f"Failed to write {self.name} review entry for {original[:50]!r}: {e}")
        else:
            logger.debug(f"Flagged for review ({self.name}): {original!r}")
        return entry

    def records(self) -> Dict[str, str]:
        return self.store.load().data

    def __len__(self) -> int:
        return len(self.records())


@dataclass
class ReviewSinks:
    unchanged: ReviewSink = field(default_factory=lambda: ReviewSink(name="unchanged"))
    needs_review: ReviewSink = field(default_factory=lambda: ReviewSink(name="needs_review"))


@dataclass
class ErrorRecord:
    """Diagnostic record for one failed string."""
    kind: str
    text: str
    source_language: str
    target_language: str
    error_type: str
    message: str
    code: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    trace: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @classmethod
    def from_exception(
        cls,
        kind: str,
        text: str,
        source_language: str,
        target_language: str,
        error: BaseException,
    ) -> "ErrorRecord":
        return cls(
            kind=kind,
            text=text,
            source_language=source_language,
            target_language=target_language,
            error_type=type(error).__name__,
            message=str(error),
            code=getattr(error, 'code', None),
            details=dict(getattr(error, 'details', None) or {}),
            trace="".join(traceback.format_exception(type(error), error, error.__traceback__)),
        )


class ErrorLog:
    """Append-only sink of ErrorRecords, mirrored to a JSON-lines file when a path is set."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self.records: List[ErrorRecord] = []

    def append(self, record: ErrorRecord) -> None:
        self.records.append(record)
        if self.path is None:
            return
        try:
            if not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'a', encoding='utf-8') as f:
                f.write(json.dumps(asdict(record), ensure_ascii=False, default=str) + "\n")
        except OSError as e:
            logger.error(f"Failed to append to error log {self.path}: {e}")

    def __len__(self) -> int:
        return len(self.records)
