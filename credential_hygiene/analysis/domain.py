"""Reduce credential URLs to a service identity.

Two entries whose URLs normalize to the same string are treated as
belonging to the same service, e.g.::

    https://www.amazon.co.uk/ap/signin  -> amazon.co.uk
    shop.amazon.co.uk                    -> amazon.co.uk
    https://mail.google.com              -> google.com

The result must be stable for a given input since cluster identity is
derived from it.
"""
from __future__ import annotations

import re
from typing import FrozenSet, Iterable, Optional

from .suffixes import MULTI_PART_SUFFIXES

DEFAULT_SUBDOMAIN_PREFIXES: tuple[str, ...] = (
    "www",
    "my",
    "quote",
    "admin",
    "accounts",
    "account",
    "signin",
    "signup",
    "login",
    "logon",
    "auth",
    "secure",
    "app",
    "api",
    "mobile",
    "m",
    "myaccount",
    "newmyplans",
    "cashbackprog",
)

_SCHEME_RE = re.compile(r"^https?://")


class DomainNormalizer:
    """Maps URLs to service identities using configurable heuristics.

    Parameters
    ----------
    subdomain_prefixes : Iterable[str], optional
        Leading labels that never identify a service on their own
        (``www``, ``login`` ...). Given with or without the trailing dot.
    multi_part_suffixes : Iterable[str], optional
        Dotted public suffixes spanning more than one label (``co.uk``).

    """

    def __init__(
        self,
        subdomain_prefixes: Optional[Iterable[str]] = None,
        multi_part_suffixes: Optional[Iterable[str]] = None,
    ) -> None:
        prefixes = DEFAULT_SUBDOMAIN_PREFIXES if subdomain_prefixes is None else subdomain_prefixes
        self.subdomain_prefixes: FrozenSet[str] = frozenset(
            p.strip().lower().rstrip(".") for p in prefixes if p and p.strip()
        )
        suffixes = MULTI_PART_SUFFIXES if multi_part_suffixes is None else multi_part_suffixes
        self.multi_part_suffixes: FrozenSet[str] = frozenset(
            s.strip().lower().strip(".") for s in suffixes if s and s.strip()
        )
        self._max_suffix_labels = max(
            (s.count(".") + 1 for s in self.multi_part_suffixes), default=0
        )

    def clean_host(self, url: str) -> str:
        """Lower-case the URL and cut it down to its host part."""
        host = _SCHEME_RE.sub("", url.strip().lower())
        host = re.split(r"[/?#]", host, maxsplit=1)[0]
        # user:pass@host
        host = host.rsplit("@", 1)[-1]
        # host:port
        host = host.split(":", 1)[0]
        return host.strip(".")

    def strip_prefixes(self, host: str) -> str:
        """Drop leading non-service labels while two or more labels remain."""
        labels = host.split(".")
        while (
            len(labels) > 2
            and labels[0] in self.subdomain_prefixes
            # never reduce a host to a bare public suffix
            and ".".join(labels[1:]) not in self.multi_part_suffixes
        ):
            labels.pop(0)
        return ".".join(labels)

    def match_suffix(self, labels: list[str]) -> int:
        """Return the label count of the longest multi-part suffix ending ``labels``, or 0."""
        longest = min(self._max_suffix_labels, len(labels) - 1)
        for size in range(longest, 1, -1):
            if ".".join(labels[-size:]) in self.multi_part_suffixes:
                return size
        return 0

    def base_domain(self, url: str | None) -> str:
        """Return the service identity for a URL, or ``""`` for empty input."""
        if not url:
            return ""
        host = self.clean_host(url)
        if not host:
            return ""
        host = self.strip_prefixes(host)
        labels = host.split(".")

        suffix_size = self.match_suffix(labels)
        if suffix_size:
            return ".".join(labels[-(suffix_size + 1):])
        if len(labels) >= 2:
            return ".".join(labels[-2:])
        return host


_default_normalizer = DomainNormalizer()


def base_domain(url: str | None) -> str:
    """Service identity of ``url`` using the default prefix and suffix tables."""
    return _default_normalizer.base_domain(url)
