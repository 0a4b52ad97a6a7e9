"""
Run Statistics Data Class

Contains the RunStats dataclass for tracking what a run did.
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class RunStats:
    """Counters for one document, one directory tree or a whole run."""
    files_processed: int = 0
    files_failed: int = 0
    files_skipped: int = 0           # Files without the catalog extension
    directories_failed: int = 0
    strings_seen: int = 0            # Non-empty originals with a blank target slot
    entries_without_slot: int = 0    # Originals whose target is already filled
    outcomes: Dict[str, int] = field(default_factory=dict)  # PipelineResult outcome -> count

    def record(self, outcome: str) -> None:
        self.strings_seen += 1
        self.outcomes[outcome] = self.outcomes.get(outcome, 0) + 1

    def count(self, outcome: str) -> int:
        return self.outcomes.get(outcome, 0)

    def merge(self, other: "RunStats") -> "RunStats":
        self.files_processed += other.files_processed
        self.files_failed += other.files_failed
        self.files_skipped += other.files_skipped
        self.directories_failed += other.directories_failed
        self.strings_seen += other.strings_seen
        self.entries_without_slot += other.entries_without_slot
        for outcome, count in other.outcomes.items():
            self.outcomes[outcome] = self.outcomes.get(outcome, 0) + count
        return self

    def summary(self) -> str:
        outcomes = ", ".join(f"{name}={count}" for name, count in sorted(self.outcomes.items())) or "none"
        return (
            f"{self.files_processed} file(s) written, {self.files_failed} failed, "
            f"{self.files_skipped} skipped; {self.strings_seen} string(s): {outcomes}"
        )
