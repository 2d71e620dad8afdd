"""inkwell-core: Manuscript and codex synchronization logic."""

from inkwell_core.aggregates import project_stats, project_word_count, recompute, scene_word_count
from inkwell_core.codex import MergeResult, build_manual_entry, find_character, format_candidate, merge
from inkwell_core.debounce import Debouncer
from inkwell_core.edits import apply_patch, find_act, find_scene
from inkwell_core.errors import ChatError, DraftError, InkwellError, ParseError, ScanError, ServiceError
from inkwell_core.history import PromptHistory, PromptLog
from inkwell_core.library import all_tags, filter_projects
from inkwell_core.parsers import parse_ai_extraction, parse_manual_import, strip_code_fences
from inkwell_core.ports import (
    GenerationServiceProtocol,
    ProjectStoreProtocol,
    PromptHistoryStoreProtocol,
    StoreError,
)
from inkwell_core.store import ManuscriptStore
from inkwell_core.sync import SyncController

__version__ = "0.1.0"

__all__ = [
    "ChatError",
    "Debouncer",
    "DraftError",
    "GenerationServiceProtocol",
    "InkwellError",
    "ManuscriptStore",
    "MergeResult",
    "ParseError",
    "ProjectStoreProtocol",
    "PromptHistory",
    "PromptHistoryStoreProtocol",
    "PromptLog",
    "ScanError",
    "ServiceError",
    "StoreError",
    "SyncController",
    "__version__",
    "all_tags",
    "apply_patch",
    "build_manual_entry",
    "filter_projects",
    "find_act",
    "find_character",
    "find_scene",
    "format_candidate",
    "merge",
    "parse_ai_extraction",
    "parse_manual_import",
    "project_stats",
    "project_word_count",
    "recompute",
    "scene_word_count",
    "strip_code_fences",
]
