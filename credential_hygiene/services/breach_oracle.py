"""Breach corpus lookups using the k-anonymity range API.

Only the first five hex characters of the password's SHA-1 leave the
process; the endpoint answers with every known suffix under that prefix and
the match is done locally.
"""
from __future__ import annotations

import hashlib
from typing import Dict, MutableMapping, Optional, Protocol

import requests
from verboselogs import VerboseLogger

BREACH_CHECK_FAILED = -1
DEFAULT_BREACH_API_URL = "https://api.pwnedpasswords.com/range"
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "credential-hygiene/1.0"
PREFIX_LENGTH = 5


class BreachChecker(Protocol):
    """Anything able to answer "how often was this password breached"."""

    def check_breach(self, password: str, cache: MutableMapping[str, int]) -> int:
        ...

    def new_cache(self) -> MutableMapping[str, int]:
        ...


def sha1_range_key(password: str) -> tuple[str, str]:
    """Split the uppercase hex SHA-1 of ``password`` into (prefix, suffix)."""
    digest = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()
    return digest[:PREFIX_LENGTH], digest[PREFIX_LENGTH:]


def find_suffix_count(body: str, suffix: str) -> int:
    """Return the count for ``suffix`` in a ``SUFFIX:COUNT`` range response, 0 if absent.

    Raises
    ------
    ValueError
        If the matching line carries a count that is not a non-negative integer.

    """
    for line in body.splitlines():
        line = line.strip()
        if not line or ":" not in line:
            continue
        candidate, count = line.split(":", 1)
        if candidate.strip().upper() == suffix:
            value = int(count.strip())
            if value < 0:
                raise ValueError(f"negative count {value}")
            return value
    return 0


class BreachOracle:
    """Client for the range-query breach endpoint.

    Parameters
    ----------
    session : requests.Session, optional
        HTTP session; injected so tests can substitute a fake.
    endpoint : str, optional
        Base URL; the hash prefix is appended as the last path segment.
    timeout : float, optional
        Per-request timeout in seconds.
    user_agent : str, optional
        Value of the ``User-Agent`` header.
    add_padding : bool, optional
        Ask the API to pad responses so their size does not leak the prefix.
    logger : VerboseLogger, optional
        Logger instance.

    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        endpoint: str = DEFAULT_BREACH_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        add_padding: bool = True,
        logger: Optional[VerboseLogger] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.headers: Dict[str, str] = {"User-Agent": user_agent}
        if add_padding:
            self.headers["Add-Padding"] = "true"
        self.logger = logger or VerboseLogger(__name__)

    def new_cache(self) -> Dict[str, int]:
        """A fresh per-run cache. Never share one between concurrent runs."""
        return {}

    def lookup(self, password: str) -> int:
        """Query the endpoint for one password, without caching.

        Returns the breach count, 0 when unknown to the corpus, or
        ``BREACH_CHECK_FAILED`` on timeout, transport error or non-2xx status.
        """
        prefix, suffix = sha1_range_key(password)
        url = f"{self.endpoint}/{prefix}"
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.Timeout:
            self.logger.warning(f"breach_check prefix={prefix} timed out after {self.timeout}s")
            return BREACH_CHECK_FAILED
        except requests.RequestException as err:
            self.logger.warning(f"breach_check prefix={prefix} transport error: {err}")
            return BREACH_CHECK_FAILED

        if not 200 <= response.status_code < 300:
            self.logger.warning(f"breach_check prefix={prefix} status={response.status_code}")
            return BREACH_CHECK_FAILED

        try:
            count = find_suffix_count(response.text, suffix)
        except ValueError as err:
            self.logger.warning(f"breach_check prefix={prefix} malformed response: {err}")
            return BREACH_CHECK_FAILED

        self.logger.spam(f"breach_check prefix={prefix} count={count}")
        return count

    def check_breach(self, password: str, cache: MutableMapping[str, int]) -> int:
        """Breach count for ``password``, consulting and filling the per-run cache.

        Failures are cached as ``BREACH_CHECK_FAILED`` too, so a password is
        looked up at most once per run; the next run starts with a new cache.
        """
        if password in cache:
            return cache[password]
        result = self.lookup(password)
        cache[password] = result
        return result
