from math import log2
import re

from passforge import crack_time
from passforge.entities import (
    CompositionFlags,
    FeedbackItem,
    FeedbackKind,
    PatternFlags,
    StrengthAnalysis,
    StrengthTier,
)
from passforge.reference_data import ReferenceLists, default_reference


SYMBOLS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

_UPPER_RE = re.compile(r"[A-Z]")
_LOWER_RE = re.compile(r"[a-z]")
_DIGIT_RE = re.compile(r"[0-9]")
_SYMBOL_RE = re.compile(f"[{re.escape(SYMBOLS)}]")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")
_REPEAT_RE = re.compile(r"(.)\1{2,}", re.DOTALL)

# Descending runs ("321", "cba") are not detected
_ASCENDING_SEQUENCES = ("0123456789", "abcdefghijklmnopqrstuvwxyz")
_SEQUENCE_WINDOW = 3
_SEQUENTIAL_RUNS: frozenset[str] = frozenset(
    seq[i : i + _SEQUENCE_WINDOW]
    for seq in _ASCENDING_SEQUENCES
    for i in range(len(seq) - _SEQUENCE_WINDOW + 1)
)

LENGTH_THRESHOLDS = (8, 12, 16, 20)
RECOMMENDED_LENGTH = 12

COMMON_PASSWORD_PENALTY = 3
PATTERN_PENALTY = 1

MAX_SCORE = len(LENGTH_THRESHOLDS) + 4

# Inclusive upper score bound per tier, weakest first. A clean credential
# reaching MAX_SCORE is strong.
_TIER_BOUNDS: tuple[tuple[int, StrengthTier], ...] = (
    (2, StrengthTier.VERY_WEAK),
    (4, StrengthTier.WEAK),
    (6, StrengthTier.FAIR),
    (MAX_SCORE - 1, StrengthTier.GOOD),
)

# Pool contributions for the entropy estimate
_POOL_LOWER = 26
_POOL_UPPER = 26
_POOL_DIGITS = 10
_POOL_OTHER = 32


def classify_composition(credential: str) -> CompositionFlags:
    return CompositionFlags(
        has_uppercase=bool(_UPPER_RE.search(credential)),
        has_lowercase=bool(_LOWER_RE.search(credential)),
        has_digits=bool(_DIGIT_RE.search(credential)),
        has_symbols=bool(_SYMBOL_RE.search(credential)),
    )


def has_sequential_run(credential: str) -> bool:
    folded = credential.lower()
    return any(
        folded[i : i + _SEQUENCE_WINDOW] in _SEQUENTIAL_RUNS
        for i in range(len(folded) - _SEQUENCE_WINDOW + 1)
    )


def has_keyboard_pattern(credential: str, reference: ReferenceLists) -> bool:
    folded = credential.lower()
    return any(pattern in folded for pattern in reference.keyboard_patterns)


def is_common_password(credential: str, reference: ReferenceLists) -> bool:
    return credential.lower() in reference.common_passwords


def has_repeating_run(credential: str) -> bool:
    return _REPEAT_RE.search(credential) is not None


def detect_patterns(credential: str, reference: ReferenceLists) -> PatternFlags:
    return PatternFlags(
        is_sequential=has_sequential_run(credential),
        is_keyboard_pattern=has_keyboard_pattern(credential, reference),
        is_common_password=is_common_password(credential, reference),
        has_repeating_run=has_repeating_run(credential),
    )


def score(length: int, composition: CompositionFlags, patterns: PatternFlags) -> int:
    total = sum(1 for threshold in LENGTH_THRESHOLDS if length >= threshold)
    total += composition.count
    if patterns.is_common_password:
        total -= COMMON_PASSWORD_PENALTY
    if patterns.is_sequential:
        total -= PATTERN_PENALTY
    if patterns.is_keyboard_pattern:
        total -= PATTERN_PENALTY
    if patterns.has_repeating_run:
        total -= PATTERN_PENALTY
    return total


def tier_for_score(value: int) -> StrengthTier:
    for upper, tier in _TIER_BOUNDS:
        if value <= upper:
            return tier
    return StrengthTier.STRONG


def pool_size(credential: str) -> int:
    size = 0
    if _LOWER_RE.search(credential):
        size += _POOL_LOWER
    if _UPPER_RE.search(credential):
        size += _POOL_UPPER
    if _DIGIT_RE.search(credential):
        size += _POOL_DIGITS
    if _NON_ALNUM_RE.search(credential):
        size += _POOL_OTHER
    return size


def entropy_bits(credential: str) -> float:
    """Composition-based upper bound: length * log2(pool size).

    Pattern weaknesses are not subtracted here; they only affect the score.
    """
    size = pool_size(credential)
    if size == 0:
        return 0.0
    return len(credential) * log2(size)


def build_feedback(
    length: int, composition: CompositionFlags, patterns: PatternFlags
) -> tuple[FeedbackItem, ...]:
    items: list[FeedbackItem] = []

    def add(ok: bool, positive: str, negative: str) -> None:
        if ok:
            items.append(FeedbackItem(kind=FeedbackKind.POSITIVE, text=positive))
        else:
            items.append(FeedbackItem(kind=FeedbackKind.NEGATIVE, text=negative))

    add(
        length >= RECOMMENDED_LENGTH,
        f"Good length ({length} characters)",
        f"Too short - use at least {RECOMMENDED_LENGTH} characters (currently {length})",
    )
    add(
        composition.has_uppercase,
        "Contains uppercase letters",
        "Add uppercase letters (A-Z)",
    )
    add(
        composition.has_lowercase,
        "Contains lowercase letters",
        "Add lowercase letters (a-z)",
    )
    add(composition.has_digits, "Contains numbers", "Add numbers (0-9)")
    add(
        composition.has_symbols,
        "Contains special symbols",
        "Add special symbols (!@#$%^&*)",
    )

    negatives = (
        (patterns.is_common_password, "This is a common password - avoid it!"),
        (patterns.is_sequential, "Contains sequential characters (123, abc)"),
        (patterns.is_keyboard_pattern, "Contains keyboard patterns (qwerty, asdf)"),
        (patterns.has_repeating_run, "Contains repeating characters (aaa, 111)"),
    )
    for flagged, text in negatives:
        if flagged:
            items.append(FeedbackItem(kind=FeedbackKind.NEGATIVE, text=text))

    return tuple(items)


def analyze(
    credential: str,
    reference: ReferenceLists | None = None,
    guesses_per_second: float | None = None,
) -> StrengthAnalysis | None:
    """Analyze a credential's strength.

    Returns None for an empty credential, which callers treat as a reset.
    """
    if not credential:
        return None
    if reference is None:
        reference = default_reference()

    length = len(credential)
    composition = classify_composition(credential)
    patterns = detect_patterns(credential, reference)
    value = score(length, composition, patterns)
    bits = entropy_bits(credential)

    return StrengthAnalysis(
        length=length,
        composition=composition,
        patterns=patterns,
        score=value,
        entropy_bits=bits,
        tier=tier_for_score(value),
        crack_time=crack_time.estimate(bits, guesses_per_second),
        feedback=build_feedback(length, composition, patterns),
    )
