from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from symdelete.spellcheck.index import DictionaryIndex

WORD_RE = re.compile(r"^[^\W\d_]+$")
MAX_EDIT_DISTANCE = 2


@dataclass(frozen=True)
class WordEntry:
    word: str
    frequency: int = field(default=1, compare=False)


@dataclass(frozen=True)
class Suggestion:
    word: str
    distance: int
    frequency: int


class SpellCheckerEngine:
    def normalize_word(self, word: str) -> str:
        return (word or "").strip().lower()

    def is_valid_word(self, word: str) -> bool:
        return bool(word) and WORD_RE.match(word) is not None

    def generate_variants(self, word: str, max_distance: int = MAX_EDIT_DISTANCE) -> set[str]:
        if max_distance < 0:
            raise ValueError(f"max_distance must be >= 0, got {max_distance}")

        variants: set[str] = {word}
        frontier: set[str] = {word}
        for _ in range(max_distance):
            next_frontier: set[str] = set()
            for item in frontier:
                for idx in range(len(item)):
                    delete = item[:idx] + item[idx + 1 :]
                    if delete in variants:
                        continue
                    variants.add(delete)
                    next_frontier.add(delete)
            if not next_frontier:
                break
            frontier = next_frontier
        return variants

    def edit_distance(self, source: str, target: str, max_distance: int = MAX_EDIT_DISTANCE) -> int | None:
        """Damerau–Levenshtein distance between two words, or None beyond ``max_distance``.

        Insertions, deletions, substitutions and adjacent transpositions all
        cost 1, and characters between a transposed pair may still be edited.
        """
        source = self.normalize_word(source)
        target = self.normalize_word(target)

        if source == target:
            return 0
        if not source or not target:
            distance = max(len(source), len(target))
            return distance if distance <= max_distance else None
        if abs(len(source) - len(target)) > max_distance:
            return None

        # Row 0 and column 0 hold a sentinel larger than any real distance;
        # table[i + 1][j + 1] is the distance between source[:i] and target[:j].
        sentinel = len(source) + len(target)
        table = [[sentinel] * (len(target) + 2) for _ in range(len(source) + 2)]
        for i in range(len(source) + 1):
            table[i + 1][1] = i
        for j in range(len(target) + 1):
            table[1][j + 1] = j

        last_row_of: dict[str, int] = {}
        for i, source_char in enumerate(source, start=1):
            last_match_col = 0
            for j, target_char in enumerate(target, start=1):
                swap_row = last_row_of.get(target_char, 0)
                swap_col = last_match_col
                if source_char == target_char:
                    cost = 0
                    last_match_col = j
                else:
                    cost = 1
                table[i + 1][j + 1] = min(
                    table[i][j] + cost,
                    table[i + 1][j] + 1,
                    table[i][j + 1] + 1,
                    table[swap_row][swap_col] + (i - swap_row - 1) + 1 + (j - swap_col - 1),
                )
            last_row_of[source_char] = i

        distance = table[-1][-1]
        return distance if distance <= max_distance else None

    def rank_key(self, suggestion: Suggestion) -> tuple[int, int, str]:
        return (suggestion.distance, -suggestion.frequency, suggestion.word)

    def suggest(
        self,
        query: str,
        index: DictionaryIndex,
        max_distance: int | None = None,
        limit: int | None = 0,
        *,
        closest_only: bool = False,
    ) -> list[Suggestion]:
        """Return dictionary words within ``max_distance`` edits of ``query``.

        Candidates come from equality lookups of the query's deletion variants
        in ``index``; each one is then verified with the exact Damerau–Levenshtein distance.
        Results are ordered by distance, then frequency (highest first), then
        word. ``limit`` of 0 or None returns every match. An empty list means
        there is no suggestion.
        """
        if max_distance is None:
            max_distance = index.max_distance
        if max_distance != index.max_distance:
            raise ValueError(
                f"index was built with max_distance={index.max_distance}, "
                f"cannot query with max_distance={max_distance}"
            )
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")

        normalized_query = self.normalize_word(query)
        if not normalized_query:
            return []

        candidates: set[str] = set()
        for variant in self.generate_variants(normalized_query, max_distance):
            hits = index.lookup(variant)
            if hits:
                candidates.update(hits)

        suggestions: list[Suggestion] = []
        for candidate in candidates:
            distance = self.edit_distance(normalized_query, candidate, max_distance=max_distance)
            if distance is None:
                continue
            suggestions.append(Suggestion(candidate, distance, index.frequency(candidate)))

        suggestions.sort(key=self.rank_key)

        if closest_only and suggestions:
            closest = suggestions[0].distance
            suggestions = [s for s in suggestions if s.distance == closest]

        if limit:
            return suggestions[:limit]
        return suggestions


spellchecker_engine = SpellCheckerEngine()


def normalize_word(word: str) -> str:
    return spellchecker_engine.normalize_word(word)


def is_valid_word(word: str) -> bool:
    return spellchecker_engine.is_valid_word(word)


def generate_variants(word: str, max_distance: int = MAX_EDIT_DISTANCE) -> set[str]:
    return spellchecker_engine.generate_variants(word, max_distance=max_distance)


def edit_distance(source: str, target: str, max_distance: int = MAX_EDIT_DISTANCE) -> int | None:
    return spellchecker_engine.edit_distance(source, target, max_distance=max_distance)


def rank_suggestions(suggestions: Iterable[Suggestion]) -> list[Suggestion]:
    return sorted(suggestions, key=spellchecker_engine.rank_key)


def suggest(
    query: str,
    index: DictionaryIndex,
    max_distance: int | None = None,
    limit: int | None = 0,
    *,
    closest_only: bool = False,
) -> list[Suggestion]:
    return spellchecker_engine.suggest(
        query,
        index,
        max_distance=max_distance,
        limit=limit,
        closest_only=closest_only,
    )
