"""
Translation module - Core translation functionality

This module provides:
- TranslationPipeline: per-string protect/translate/restore workflow
- CatalogRewriter: fills blank targets of catalog files and trees
- RunStats: run statistics dataclass
- Checks for bracket exemption and review flags
"""

from potstranslate.translation.progress import RunStats
from potstranslate.translation.pipeline import Outcome, PipelineResult, TranslationPipeline
from potstranslate.translation.rewriter import (
    CatalogEntry,
    CatalogRewriter,
    FileResult,
    FileStatus,
    escape_po_text,
    find_entries,
)
from potstranslate.translation.validator import (
    is_bracket_enclosed,
    is_unchanged,
    needs_review,
    unsafe_characters,
)
