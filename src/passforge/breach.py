"""k-anonymity breach lookup.

Only the first five hex characters of the credential's SHA-1 digest leave the
process. The range endpoint answers with every known suffix sharing that
prefix and the suffix is matched locally.
"""

import asyncio
import re
from typing import Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout
from loguru import logger

from passforge.config import config
from passforge.entities import BreachRecord, EmptyInput, LookupUnavailable
from passforge.utils import sha1_hex


PREFIX_LENGTH = 5
SUFFIX_LENGTH = 35

_RANGE_LINE_RE = re.compile(r"^([0-9A-Fa-f]{35}):(\d+)$")


class LookupTransport(Protocol):
    async def lookup(self, prefix: str) -> str:
        """Return the raw ``SUFFIX:COUNT`` table for ``prefix``."""
        ...


class AiohttpRangeTransport:
    """Range lookups over HTTP. Owns its session; use as an async context manager."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        add_padding: bool | None = None,
        session: ClientSession | None = None,
    ):
        self.base_url = (base_url or config.breach_range_url).rstrip("/")
        self.timeout = ClientTimeout(
            total=timeout or config.breach_request_timeout_seconds
        )
        self.user_agent = user_agent or config.breach_user_agent
        self.add_padding = (
            config.breach_add_padding if add_padding is None else add_padding
        )
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            headers = {"User-Agent": self.user_agent}
            if self.add_padding:
                headers["Add-Padding"] = "true"
            self._session = ClientSession(timeout=self.timeout, headers=headers)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def lookup(self, prefix: str) -> str:
        session = await self._ensure_session()
        url = f"{self.base_url}/{prefix}"
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise LookupUnavailable(
                        f"Range lookup returned HTTP {response.status}", prefix=prefix
                    )
                try:
                    return await response.text()
                except UnicodeDecodeError as e:
                    raise LookupUnavailable(
                        "Range lookup returned an undecodable body", prefix=prefix
                    ) from e
        except (ClientError, asyncio.TimeoutError) as e:
            raise LookupUnavailable(
                f"Range lookup failed: {type(e).__name__}", prefix=prefix
            ) from e


def split_hash(full_hash: str) -> tuple[str, str]:
    return full_hash[:PREFIX_LENGTH], full_hash[PREFIX_LENGTH:]


def parse_range_response(body: str, prefix: str | None = None) -> dict[str, int]:
    """Parse a newline-delimited ``SUFFIX:COUNT`` table into {SUFFIX: count}.

    Suffixes are upper-cased. Blank lines are ignored; any other line that is
    not a 35-hex-character suffix and a count raises LookupUnavailable.
    """
    table: dict[str, int] = {}
    for line_no, raw in enumerate(body.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        match = _RANGE_LINE_RE.match(line)
        if match is None:
            raise LookupUnavailable(
                f"Malformed range response at line {line_no}", prefix=prefix
            )
        suffix, count = match.groups()
        table[suffix.upper()] = int(count)
    return table


def match_suffix(suffix: str, table: dict[str, int]) -> tuple[bool, int]:
    wanted = suffix.upper()
    for candidate, count in table.items():
        if candidate.upper() == wanted:
            return True, count
    return False, 0


class BreachChecker:
    def __init__(self, transport: LookupTransport):
        self.transport = transport

    async def check(self, credential: str) -> BreachRecord:
        if not credential:
            raise EmptyInput("A credential is required for a breach check")

        full_hash = await asyncio.to_thread(sha1_hex, credential)
        prefix, suffix = split_hash(full_hash)

        logger.debug(f"Querying breach range for prefix {prefix}")
        try:
            body = await self.transport.lookup(prefix)
        except LookupUnavailable:
            logger.warning(f"Breach range lookup unavailable for prefix {prefix}")
            raise
        except (ClientError, asyncio.TimeoutError, OSError) as e:
            logger.warning(f"Breach range lookup failed for prefix {prefix}: {e!r}")
            raise LookupUnavailable(
                f"Range lookup failed: {type(e).__name__}", prefix=prefix
            ) from e

        table = parse_range_response(body, prefix=prefix)
        found, count = match_suffix(suffix, table)
        logger.info(
            f"Breach range for {prefix}: {len(table)} candidates, match_found={found}"
        )

        return BreachRecord(
            hash_prefix=prefix,
            suffix_table=table,
            full_hash=full_hash,
            match_found=found,
            occurrence_count=count,
        )


async def check_breach(
    credential: str, transport: LookupTransport | None = None
) -> BreachRecord:
    """One-shot check; opens and closes an HTTP transport when none is given."""
    if transport is not None:
        return await BreachChecker(transport).check(credential)
    async with AiohttpRangeTransport() as http_transport:
        return await BreachChecker(http_transport).check(credential)
