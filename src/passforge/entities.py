from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PassforgeError(Exception):
    "Base class for errors raised by passforge."


class InvalidOptions(PassforgeError):
    "Raised when generation options cannot produce a credential."


class EmptyInput(PassforgeError):
    "Raised when an operation that needs a credential is given an empty one."


class LookupUnavailable(PassforgeError):
    """Raised when the breach range lookup fails or returns garbage.

    The underlying error, when there is one, is chained as ``__cause__``.
    """

    def __init__(self, message: str, prefix: str | None = None):
        super().__init__(message)
        self.prefix = prefix


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class StrengthTier(StrEnum):
    """Discrete strength tiers, declared weakest first."""

    VERY_WEAK = "very_weak"
    WEAK = "weak"
    FAIR = "fair"
    GOOD = "good"
    STRONG = "strong"

    @property
    def rank(self) -> int:
        return list(StrengthTier).index(self)

    @property
    def label(self) -> str:
        return get_tier_label(self)


def get_tier_label(tier: StrengthTier) -> str:
    """Return a user-facing label for a StrengthTier value."""
    match tier:
        case StrengthTier.VERY_WEAK:
            return "Very Weak - Easily cracked"
        case StrengthTier.WEAK:
            return "Weak - Not recommended"
        case StrengthTier.FAIR:
            return "Fair - Could be better"
        case StrengthTier.GOOD:
            return "Good - Decent security"
        case StrengthTier.STRONG:
            return "Strong - Excellent security"
        case _:
            raise ValueError(f"Unknown StrengthTier: {tier}")


class CompositionFlags(ValueObject):
    has_uppercase: bool
    has_lowercase: bool
    has_digits: bool
    has_symbols: bool

    @property
    def count(self) -> int:
        return sum(
            [self.has_uppercase, self.has_lowercase, self.has_digits, self.has_symbols]
        )


class PatternFlags(ValueObject):
    is_sequential: bool
    is_keyboard_pattern: bool
    is_common_password: bool
    has_repeating_run: bool

    @property
    def any_flagged(self) -> bool:
        return (
            self.is_sequential
            or self.is_keyboard_pattern
            or self.is_common_password
            or self.has_repeating_run
        )


class FeedbackKind(StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class FeedbackItem(ValueObject):
    kind: FeedbackKind
    text: str


class CrackTimeUnit(StrEnum):
    """Crack time buckets, declared fastest first."""

    INSTANT = "instant"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    YEARS = "years"
    CENTURIES = "centuries"

    @property
    def rank(self) -> int:
        return list(CrackTimeUnit).index(self)


class CrackTimeEstimate(ValueObject):
    unit: CrackTimeUnit
    amount: int | None = None

    @property
    def text(self) -> str:
        """Display text; an amount of 1 uses the singular unit ("1 minute")."""
        match self.unit:
            case CrackTimeUnit.INSTANT:
                return "Instant"
            case CrackTimeUnit.CENTURIES:
                return "Centuries"
            case _:
                name = str(self.unit)
                if self.amount == 1:
                    name = name[:-1]
                return f"{self.amount} {name}"


class StrengthAnalysis(ValueObject):
    length: int = Field(ge=0)
    composition: CompositionFlags
    patterns: PatternFlags
    score: int
    entropy_bits: float = Field(ge=0.0)
    tier: StrengthTier
    crack_time: str
    feedback: tuple[FeedbackItem, ...] = ()


class GenerationOptions(BaseModel):
    length: int = Field(default=16, ge=1, le=128)
    include_uppercase: bool = True
    include_lowercase: bool = True
    include_digits: bool = True
    include_symbols: bool = True
    exclude_ambiguous: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def any_class_enabled(self) -> bool:
        return (
            self.include_uppercase
            or self.include_lowercase
            or self.include_digits
            or self.include_symbols
        )

    @property
    def enabled_class_count(self) -> int:
        return sum(
            [
                self.include_uppercase,
                self.include_lowercase,
                self.include_digits,
                self.include_symbols,
            ]
        )

    @model_validator(mode="after")
    def _length_fits_enabled_classes(self) -> "GenerationOptions":
        # No enabled class at all is left for generate() to reject
        if self.length < self.enabled_class_count:
            raise ValueError(
                f"Length {self.length} is too short to include all "
                f"{self.enabled_class_count} selected character types"
            )
        return self


class CharacterClass(ValueObject):
    name: str
    alphabet: str
    unambiguous_alphabet: str

    def alphabet_for(self, exclude_ambiguous: bool) -> str:
        return self.unambiguous_alphabet if exclude_ambiguous else self.alphabet


class BreachRecord(ValueObject):
    hash_prefix: str = Field(min_length=5, max_length=5)
    suffix_table: dict[str, int] = Field(default_factory=dict)
    full_hash: str = Field(min_length=40, max_length=40)
    match_found: bool
    occurrence_count: int = Field(ge=0)
