from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterable, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from passforge.config import config
from passforge.utils import read_word_list


# Frequent entries from public breach dumps
DEFAULT_COMMON_PASSWORDS: Tuple[str, ...] = (
    "password",
    "123456",
    "12345678",
    "qwerty",
    "abc123",
    "monkey",
    "1234567",
    "letmein",
    "trustno1",
    "dragon",
    "baseball",
    "iloveyou",
    "master",
    "sunshine",
    "ashley",
    "bailey",
    "passw0rd",
    "shadow",
    "123123",
    "654321",
    "superman",
    "qazwsx",
    "michael",
    "football",
)

# Runs of physically adjacent keys
DEFAULT_KEYBOARD_PATTERNS: Tuple[str, ...] = (
    "qwerty",
    "asdfgh",
    "zxcvbn",
    "1qaz2wsx",
    "qwertyuiop",
    "asdfghjkl",
)


class ReferenceLists(BaseModel):
    """Static word lists the strength analyzer matches against.

    Entries are stored lower-cased so lookups can case-fold the candidate only.
    """

    common_passwords: frozenset[str]
    keyboard_patterns: tuple[str, ...]

    model_config = ConfigDict(frozen=True)

    @field_validator("common_passwords", mode="before")
    @classmethod
    def _fold_common(cls, value: Iterable[str]) -> frozenset[str]:
        return frozenset(v.lower() for v in value if v)

    @field_validator("keyboard_patterns", mode="before")
    @classmethod
    def _fold_patterns(cls, value: Iterable[str]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(v.lower() for v in value if v))

    def with_extra(
        self,
        common_passwords: Iterable[str] = (),
        keyboard_patterns: Iterable[str] = (),
    ) -> ReferenceLists:
        return ReferenceLists(
            common_passwords=[*self.common_passwords, *common_passwords],
            keyboard_patterns=[*self.keyboard_patterns, *keyboard_patterns],
        )

    @classmethod
    def from_files(
        cls,
        common_passwords_path: Path | None = None,
        keyboard_patterns_path: Path | None = None,
    ) -> ReferenceLists:
        """Build lists from files, falling back to the built-in defaults per list."""
        common: Iterable[str] = DEFAULT_COMMON_PASSWORDS
        patterns: Iterable[str] = DEFAULT_KEYBOARD_PATTERNS
        if common_passwords_path is not None:
            common = read_word_list(common_passwords_path)
            logger.info(
                f"Loaded {len(common)} common passwords from {common_passwords_path}"
            )
        if keyboard_patterns_path is not None:
            patterns = read_word_list(keyboard_patterns_path)
            logger.info(
                f"Loaded {len(patterns)} keyboard patterns from {keyboard_patterns_path}"
            )
        return cls(common_passwords=common, keyboard_patterns=patterns)


@lru_cache
def default_reference() -> ReferenceLists:
    return ReferenceLists.from_files(
        common_passwords_path=config.common_passwords_file,
        keyboard_patterns_path=config.keyboard_patterns_file,
    )
