import hashlib
import math
from pathlib import Path


def sha1_hex(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest().upper()


def round_half_up(value: float) -> int:
    # Matches JavaScript Math.round for the non-negative values used here
    assert value >= 0, "value must be non-negative"
    return math.floor(value + 0.5)


def read_word_list(path: Path) -> list[str]:
    """Read a newline-delimited word list.

    Blank lines and lines starting with ``#`` are skipped; entries are stripped
    and case-folded. Order is preserved and duplicates are dropped.
    """
    words: list[str] = []
    seen: set[str] = set()
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            entry = line.strip()
            if not entry or entry.startswith("#"):
                continue
            entry = entry.lower()
            if entry in seen:
                continue
            seen.add(entry)
            words.append(entry)
    return words
