import logging
from pathlib import Path
from typing import Iterable, Iterator

from symdelete.spellcheck.engine import WordEntry, is_valid_word, normalize_word

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class DictionarySourceError(OSError):
    pass


def _parse_counted_line(line: str) -> WordEntry | None:
    parts = line.split()
    if not parts or len(parts) > 2:
        return None

    word = normalize_word(parts[0])
    if not is_valid_word(word):
        return None

    if len(parts) == 1:
        return WordEntry(word)

    count_token = parts[1].replace(",", "")
    if not count_token.isdigit():
        return None

    return WordEntry(word, int(count_token))


def iter_dictionary(lines: Iterable[str], *, source: str = "<lines>") -> Iterator[WordEntry]:
    """Yield one WordEntry per valid ``word [count]`` line.

    Blank lines and ``#`` comments are ignored; malformed lines are logged and
    skipped.
    """
    skipped = 0
    for line_no, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        entry = _parse_counted_line(line)
        if entry is None:
            skipped += 1
            logger.warning("%s:%s: skipping malformed dictionary line %r", source, line_no, line)
            continue
        yield entry

    if skipped:
        logger.info("skipped %s malformed lines from %s", skipped, source)


def read_dictionary(path: str | Path) -> list[WordEntry]:
    path = Path(path)
    try:
        with path.open("r", encoding=ENCODING, errors="replace") as handle:
            entries = list(iter_dictionary(handle, source=str(path)))
    except OSError as exc:
        raise DictionarySourceError(f"could not read dictionary {path}: {exc}") from exc

    logger.info("loaded %s dictionary entries from %s", len(entries), path)
    return entries
