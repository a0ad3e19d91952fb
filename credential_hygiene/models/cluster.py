"""Data models produced by the credential grouper."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .credential import CredentialEntry


@dataclass(frozen=True)
class DuplicateCluster:
    """Entries believed to be the same account on the same service.

    Attributes
    ----------
    service_identity : str
        Normalized service, see ``analysis.domain.base_domain``.
    login_identity : str
        Account key within the service, see ``models.credential.login_identity``.
    members : tuple of CredentialEntry
        Members ranked by completeness (best first, ties in input order).

    """

    service_identity: str
    login_identity: str
    members: Tuple[CredentialEntry, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", tuple(self.members))
        if not self.members:
            raise ValueError("a cluster needs at least one member")

    @property
    def key(self) -> str:
        return f"{self.service_identity}|{self.login_identity}"

    @property
    def canonical(self) -> CredentialEntry:
        """The entry to keep."""
        return self.members[0]

    @property
    def redundant(self) -> Tuple[CredentialEntry, ...]:
        return self.members[1:]

    @property
    def is_duplicate(self) -> bool:
        return len(self.members) > 1


@dataclass(frozen=True)
class GroupingResult:
    """Outcome of grouping one credential set.

    Attributes
    ----------
    clusters : tuple of DuplicateCluster
        Clusters with more than one member.
    singletons : tuple of DuplicateCluster
        One-member clusters, including members of buckets excluded for
        sharing a very strong password.
    incomplete : tuple of CredentialEntry
        Entries with neither username nor password.
    skipped_no_url : tuple of CredentialEntry
        Entries without a URL, left out of grouping.
    unparseable : tuple of CredentialEntry
        Entries whose URL yields no service identity.
    excluded_strong : tuple of DuplicateCluster
        Multi-member buckets not flagged because their shared password is
        above the strong-entropy threshold.

    """

    clusters: Tuple[DuplicateCluster, ...] = field(default_factory=tuple)
    singletons: Tuple[DuplicateCluster, ...] = field(default_factory=tuple)
    incomplete: Tuple[CredentialEntry, ...] = field(default_factory=tuple)
    skipped_no_url: Tuple[CredentialEntry, ...] = field(default_factory=tuple)
    unparseable: Tuple[CredentialEntry, ...] = field(default_factory=tuple)
    excluded_strong: Tuple[DuplicateCluster, ...] = field(default_factory=tuple)
