#!/usr/bin/env python3
import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from symdelete.batch.dictionary_source import DictionarySourceError, read_dictionary
from symdelete.common.config import settings
from symdelete.spellcheck.builder import IndexBuilder
from symdelete.spellcheck.engine import suggest

logger = logging.getLogger("suggest_repl")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Build a deletion index from a word list and suggest spellings interactively."
    )
    parser.add_argument("--dictionary", default=settings.dictionary_path, help="Word list, one 'word [count]' per line")
    parser.add_argument("--max-distance", type=int, default=settings.max_distance)
    parser.add_argument("--limit", type=int, default=settings.suggest_limit, help="0 means unlimited")
    parser.add_argument("--closest-only", action="store_true", help="Only show the nearest matches")
    parser.add_argument("--workers", type=int, default=settings.build_workers)
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level)

    try:
        entries = read_dictionary(args.dictionary)
        builder = IndexBuilder(
            args.max_distance,
            workers=args.workers,
            chunk_size=settings.build_chunk_size,
            progress_interval=settings.progress_interval,
        )
    except (DictionarySourceError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    gate = builder.start(entries)
    try:
        index = gate.wait()
    except KeyboardInterrupt:
        builder.abort()
        return 130
    except Exception as exc:
        logger.error("index build failed: %s", exc)
        return 1

    while True:
        try:
            word = input("\n> Enter a word, can be misspelled: ")
        except EOFError:
            print()
            break
        if not word.strip():
            break

        results = suggest(word, index, limit=args.limit, closest_only=args.closest_only)
        if not results:
            print("Did not find any corrections for that word")
            continue

        for rank, result in enumerate(results, start=1):
            print(f"{rank:>3}. {result.word:<24} distance={result.distance} frequency={result.frequency}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
