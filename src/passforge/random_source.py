import secrets
from typing import MutableSequence, Protocol, TypeVar


T = TypeVar("T")


class RandomSource(Protocol):
    def next_in_bound(self, exclusive_upper_bound: int) -> int:
        """Return an integer uniformly distributed over [0, exclusive_upper_bound)."""
        ...


class SystemRandomSource:
    """Bounded integers from the OS CSPRNG via rejection sampling.

    Draws ``bound.bit_length()`` random bits and redraws whenever the value
    lands at or above the bound, so every result is equally likely. At most
    half of the draws are rejected on average.
    """

    def next_in_bound(self, exclusive_upper_bound: int) -> int:
        if exclusive_upper_bound < 1:
            raise ValueError(
                f"exclusive_upper_bound must be positive, got {exclusive_upper_bound}"
            )
        if exclusive_upper_bound == 1:
            return 0
        bits = exclusive_upper_bound.bit_length()
        while True:
            candidate = secrets.randbits(bits)
            if candidate < exclusive_upper_bound:
                return candidate


def choice(source: RandomSource, seq: str) -> str:
    return seq[source.next_in_bound(len(seq))]


def shuffle(source: RandomSource, items: MutableSequence[T]) -> None:
    # Fisher-Yates, in place
    for i in range(len(items) - 1, 0, -1):
        j = source.next_in_bound(i + 1)
        items[i], items[j] = items[j], items[i]
