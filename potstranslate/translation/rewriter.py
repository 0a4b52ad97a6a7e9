"""
Catalog Rewriter

Fills the blank targets of a PO/POT catalog:

    msgid "Hello %s"          msgid "Hello %s"
    msgstr ""          ->     msgstr "Olá %s"

Each msgid is paired with the first blank `msgstr ""` of its own entry,
i.e. before the next msgid, so repeated originals never fill each other's
slots. Only that slot is rewritten; every other byte of the document is
kept. Directory trees are walked recursively and mirrored to an output
tree.
"""

import re
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from potstranslate.logger import get_logger
from potstranslate.translation.pipeline import TranslationPipeline
from potstranslate.translation.progress import RunStats

logger = get_logger(__name__)

MSGID_PATTERN = re.compile(r'^[ \t]*msgid[ \t]+"((?:[^"\\\n]|\\.)*)"', re.MULTILINE)
MSGSTR_SLOT_PATTERN = re.compile(r'^[ \t]*msgstr[ \t]*("")[ \t]*\r?$', re.MULTILINE)
CONTINUATION_PATTERN = re.compile(r'\r?\n[ \t]*"')

# Characters that may follow a backslash in a PO string (C escapes, octal, hex)
PO_ESCAPES = frozenset("\\\"'?abfnrtv01234567x")


@dataclass
class CatalogEntry:
    """One msgid and the span of its blank target, if it has one."""
    original: str
    msgid_start: int
    slot_span: Optional[Tuple[int, int]] = None


def escape_po_text(text: str) -> str:
    """
    Make translator output safe inside a PO double-quoted string.

    Valid escape sequences are kept; bare quotes, raw control characters
    and any other backslash are escaped.

    Examples:
        >>> escape_po_text('Diga "oi"')
        'Diga \\\\"oi\\\\"'
        >>> escape_po_text('Linha\\nnova')
        'Linha\\\\nnova'
        >>> escape_po_text('Linha\\\\ nnova')
        'Linha\\\\\\\\ nnova'
    """
    out = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text) and text[i + 1] in PO_ESCAPES:
            out.append(text[i:i + 2])
            i += 2
            continue
        if char == "\\":
            out.append("\\\\")
        elif char == '"':
            out.append('\\"')
        elif char == "\n":
            out.append("\\n")
        elif char == "\t":
            out.append("\\t")
        elif char == "\r":
            out.append("\\r")
        else:
            out.append(char)
        i += 1
    return "".join(out)


def _is_blank_slot(content: str, match: re.Match) -> bool:
    # `msgstr ""` followed by "..." lines is a multi-line, non-empty target
    return CONTINUATION_PATTERN.match(content, match.end()) is None


def find_entries(content: str) -> List[CatalogEntry]:
    """Locate every msgid and pair it with the blank msgstr of the same entry."""
    msgids = list(MSGID_PATTERN.finditer(content))
    entries: List[CatalogEntry] = []

    for position, match in enumerate(msgids):
        window_end = msgids[position + 1].start() if position + 1 < len(msgids) else len(content)
        entry = CatalogEntry(original=match.group(1), msgid_start=match.start())

        for slot in MSGSTR_SLOT_PATTERN.finditer(content, match.end(), window_end):
            if _is_blank_slot(content, slot):
                entry.slot_span = slot.span(1)
                break

        entries.append(entry)

    return entries


class FileStatus(str, Enum):
    WRITTEN = "written"
    FAILED = "failed"


@dataclass
class FileResult:
    input_path: Path
    output_path: Path
    status: FileStatus
    stats: RunStats = field(default_factory=RunStats)
    error: Optional[str] = None


class CatalogRewriter:
    """Runs catalog documents and directory trees through a TranslationPipeline."""

    def __init__(
        self,
        pipeline: TranslationPipeline,
        delay_seconds: float = 0.5,
        extension: str = ".pot",
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.pipeline = pipeline
        self.delay_seconds = delay_seconds
        self.extension = extension
        self.sleep = sleep

    def rewrite(self, content: str) -> Tuple[str, RunStats]:
        """
        Translate every blank target of one document.

        Returns:
            Tuple of (new_content, stats)
        """
        stats = RunStats()
        replacements: List[Tuple[int, int, str]] = []
        pending_delay = False

        for entry in find_entries(content):
            original = entry.original.strip()
            if not original:
                continue
            if entry.slot_span is None:
                stats.entries_without_slot += 1
                continue

            # Rate limit between strings that reach the translator
            if pending_delay and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)

            result = self.pipeline.process(original)
            stats.record(result.outcome.value)
            pending_delay = result.external_call

            start, end = entry.slot_span
            replacements.append((start, end, f'"{escape_po_text(result.text)}"'))

        pieces = []
        cursor = 0
        for start, end, value in replacements:
            pieces.append(content[cursor:start])
            pieces.append(value)
            cursor = end
        pieces.append(content[cursor:])
        return "".join(pieces), stats

    def translate_file(self, input_path: Union[str, Path], output_path: Union[str, Path]) -> FileResult:
        """Rewrite one catalog file into output_path. Errors are logged, not raised."""
        input_path = Path(input_path)
        output_path = Path(output_path)
        logger.info(f"Processing file: {input_path}")

        try:
            content = input_path.read_text(encoding="utf-8")
            new_content, stats = self.rewrite(content)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(new_content, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to process {input_path}: {e}")
            stats = RunStats(files_failed=1)
            return FileResult(input_path, output_path, FileStatus.FAILED, stats=stats, error=str(e))

        stats.files_processed += 1
        logger.info(f"Translated file saved: {output_path}")
        return FileResult(input_path, output_path, FileStatus.WRITTEN, stats=stats)

    def process_directory(self, input_dir: Union[str, Path], output_dir: Union[str, Path]) -> RunStats:
        """
        Translate every catalog below input_dir into the same layout under output_dir.

        Subdirectories are walked recursively; other files are skipped. A
        directory that cannot be listed is logged and skipped.
        """
        input_dir = Path(input_dir)
        output_dir = Path(output_dir)
        stats = RunStats()
        logger.info(f"Entering directory: {input_dir}")

        try:
            children = sorted(input_dir.iterdir())
        except OSError as e:
            logger.error(f"Failed to read directory {input_dir}: {e}")
            stats.directories_failed += 1
            return stats

        for child in children:
            target = output_dir / child.name
            try:
                if child.is_dir():
                    stats.merge(self.process_directory(child, target))
                elif child.suffix == self.extension:
                    stats.merge(self.translate_file(child, target).stats)
                else:
                    logger.debug(f"Skipping non-catalog file: {child}")
                    stats.files_skipped += 1
            except OSError as e:
                logger.error(f"Failed to process {child}: {e}")
                stats.files_failed += 1

        return stats
