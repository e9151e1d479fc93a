import pytest

from passforge.entities import LookupUnavailable
from passforge.reference_data import ReferenceLists


class ScriptedRandomSource:
    """Replays fixed draws, then falls back to a constant once exhausted."""

    def __init__(self, values=(), default: int = 0):
        self.values = list(values)
        self.default = default
        self.bounds: list[int] = []

    def next_in_bound(self, exclusive_upper_bound: int) -> int:
        assert exclusive_upper_bound >= 1
        self.bounds.append(exclusive_upper_bound)
        value = self.values.pop(0) if self.values else self.default
        assert 0 <= value < exclusive_upper_bound
        return value


class FakeRangeTransport:
    """Serves a canned range response and records every prefix it is asked for."""

    def __init__(self, body: str = "", error: Exception | None = None):
        self.body = body
        self.error = error
        self.prefixes: list[str] = []

    async def lookup(self, prefix: str) -> str:
        self.prefixes.append(prefix)
        if self.error is not None:
            raise self.error
        return self.body


@pytest.fixture
def scripted_source():
    return ScriptedRandomSource


@pytest.fixture
def fake_transport():
    return FakeRangeTransport


@pytest.fixture
def unavailable_transport():
    return FakeRangeTransport(error=LookupUnavailable("offline", prefix=None))


@pytest.fixture
def small_reference():
    return ReferenceLists(
        common_passwords=["Hunter2", "correcthorse"],
        keyboard_patterns=["poiuy"],
    )
