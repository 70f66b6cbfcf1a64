from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence, Union

from symdelete.spellcheck.engine import WordEntry, generate_variants, is_valid_word, normalize_word

logger = logging.getLogger(__name__)

RawEntry = Union[WordEntry, tuple, str]

_EMPTY: frozenset[str] = frozenset()


@dataclass(frozen=True)
class DictionaryIndex:
    """Read-only mapping of deletion variant -> dictionary words.

    ``max_distance`` is the deletion budget the index was built with; queries
    must probe it with the same value.
    """

    max_distance: int
    variants: Mapping[str, frozenset[str]] = field(default_factory=lambda: MappingProxyType({}))
    frequencies: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    def lookup(self, variant: str) -> frozenset[str]:
        return self.variants.get(variant, _EMPTY)

    def frequency(self, word: str) -> int:
        return self.frequencies.get(word, 0)

    def __contains__(self, word: object) -> bool:
        return word in self.frequencies

    def __len__(self) -> int:
        return len(self.frequencies)

    @property
    def words(self) -> frozenset[str]:
        return frozenset(self.frequencies)


@dataclass
class PartialIndex:
    variants: dict[str, set[str]] = field(default_factory=lambda: defaultdict(set))
    frequencies: Counter[str] = field(default_factory=Counter)


def coerce_entry(raw: RawEntry) -> WordEntry | None:
    """Turn a raw dictionary entry into a WordEntry, or None if it is malformed."""
    if isinstance(raw, WordEntry):
        word, frequency = raw.word, raw.frequency
    elif isinstance(raw, str):
        word, frequency = raw, 1
    elif isinstance(raw, tuple) and len(raw) in (1, 2):
        word = raw[0]
        frequency = raw[1] if len(raw) == 2 and raw[1] is not None else 1
    else:
        logger.warning("skipping malformed dictionary entry %r", raw)
        return None

    if not isinstance(word, str):
        logger.warning("skipping dictionary entry with non-string word %r", raw)
        return None

    normalized = normalize_word(word)
    if not is_valid_word(normalized):
        logger.warning("skipping dictionary entry %r: empty or outside alphabet", word)
        return None

    if isinstance(frequency, bool) or not isinstance(frequency, int) or frequency < 0:
        logger.warning("skipping dictionary entry %r: invalid frequency %r", word, frequency)
        return None

    return WordEntry(normalized, frequency)


def partition(entries: Sequence[WordEntry], chunk_size: int) -> Iterator[Sequence[WordEntry]]:
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    for start in range(0, len(entries), chunk_size):
        yield entries[start : start + chunk_size]


def build_partial(chunk: Iterable[WordEntry], max_distance: int) -> PartialIndex:
    partial = PartialIndex()
    for entry in chunk:
        partial.frequencies[entry.word] += entry.frequency
        for variant in generate_variants(entry.word, max_distance):
            partial.variants[variant].add(entry.word)
    return partial


def merge_partials(partials: Iterable[PartialIndex], max_distance: int) -> DictionaryIndex:
    """Union per-variant word sets and sum frequencies across partials.

    Both operations are associative and commutative, so the resulting index
    does not depend on the order in which partials arrive.
    """
    merged: dict[str, set[str]] = defaultdict(set)
    frequencies: Counter[str] = Counter()
    for partial in partials:
        for variant, words in partial.variants.items():
            merged[variant].update(words)
        frequencies.update(partial.frequencies)

    return DictionaryIndex(
        max_distance=max_distance,
        variants=MappingProxyType({variant: frozenset(words) for variant, words in merged.items()}),
        frequencies=MappingProxyType(dict(frequencies)),
    )
