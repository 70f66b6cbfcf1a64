from .builder import (
    BuildAbortedError,
    IndexBuilder,
    ReadinessGate,
    build_index,
)
from .engine import (
    MAX_EDIT_DISTANCE,
    WORD_RE,
    SpellCheckerEngine,
    Suggestion,
    WordEntry,
    edit_distance,
    generate_variants,
    is_valid_word,
    normalize_word,
    rank_suggestions,
    suggest,
)
from .index import (
    DictionaryIndex,
    PartialIndex,
    build_partial,
    coerce_entry,
    merge_partials,
    partition,
)

__all__ = [
    "BuildAbortedError",
    "DictionaryIndex",
    "IndexBuilder",
    "MAX_EDIT_DISTANCE",
    "PartialIndex",
    "ReadinessGate",
    "SpellCheckerEngine",
    "Suggestion",
    "WORD_RE",
    "WordEntry",
    "build_index",
    "build_partial",
    "coerce_entry",
    "edit_distance",
    "generate_variants",
    "is_valid_word",
    "merge_partials",
    "normalize_word",
    "partition",
    "rank_suggestions",
    "suggest",
]
