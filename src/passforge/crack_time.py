import math

from passforge.config import config
from passforge.entities import CrackTimeEstimate, CrackTimeUnit
from passforge.utils import round_half_up


MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
YEAR = 365 * DAY
CENTURY = 100 * YEAR

# 2.0 ** 1024 overflows a float; anything near it is centuries anyway
_MAX_EXACT_BITS = 1000.0

_BUCKETS: tuple[tuple[float, int, CrackTimeUnit], ...] = (
    (MINUTE, 1, CrackTimeUnit.SECONDS),
    (HOUR, MINUTE, CrackTimeUnit.MINUTES),
    (DAY, HOUR, CrackTimeUnit.HOURS),
    (YEAR, DAY, CrackTimeUnit.DAYS),
    (CENTURY, YEAR, CrackTimeUnit.YEARS),
)


def expected_seconds(
    entropy_bits: float, guesses_per_second: float | None = None
) -> float:
    """Expected time to find the credential, searching half the space on average."""
    rate = (
        config.guesses_per_second if guesses_per_second is None else guesses_per_second
    )
    if rate <= 0:
        raise ValueError("guesses_per_second must be positive")
    if math.isnan(entropy_bits) or entropy_bits < 0:
        entropy_bits = 0.0
    if entropy_bits > _MAX_EXACT_BITS:
        return math.inf
    total_guesses = 2.0**entropy_bits
    return total_guesses / rate / 2


def describe_seconds(seconds: float) -> CrackTimeEstimate:
    """Bucket a duration; buckets are checked fastest first and the first match wins."""
    if seconds < 1:
        return CrackTimeEstimate(unit=CrackTimeUnit.INSTANT)
    for upper, unit_seconds, unit in _BUCKETS:
        if seconds < upper:
            return CrackTimeEstimate(
                unit=unit, amount=round_half_up(seconds / unit_seconds)
            )
    return CrackTimeEstimate(unit=CrackTimeUnit.CENTURIES)


def estimate_detail(
    entropy_bits: float, guesses_per_second: float | None = None
) -> CrackTimeEstimate:
    return describe_seconds(expected_seconds(entropy_bits, guesses_per_second))


def estimate(entropy_bits: float, guesses_per_second: float | None = None) -> str:
    """Human-readable crack time, e.g. "3 hours".

    An amount of exactly 1 uses the singular unit ("1 minute", not "1 minutes").
    """
    return estimate_detail(entropy_bits, guesses_per_second).text
