"""Report models returned by audit and cleanup runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .cluster import DuplicateCluster
from .credential import CredentialEntry


@dataclass(frozen=True)
class WeakEntry:
    entry: CredentialEntry
    entropy_bits: int


@dataclass(frozen=True)
class BreachedEntry:
    entry: CredentialEntry
    breach_count: int


@dataclass(frozen=True)
class ReusedPassword:
    """One password used on several distinct services.

    The password itself is not repeated here; it is reachable through the
    entries for callers that choose to reveal it.
    """

    service_identities: Tuple[str, ...]
    entries: Tuple[CredentialEntry, ...]
    entropy_bits: int


@dataclass(frozen=True)
class HealthReport:
    """Immutable snapshot produced by one audit run.

    Attributes
    ----------
    weak_entries : tuple of WeakEntry
        Entries whose password estimate is below the weak threshold.
    duplicate_clusters : tuple of DuplicateCluster
        Clusters of more than one entry for the same service and login.
    breached_entries : tuple of BreachedEntry
        Entries whose password appears in the breach corpus.
    reused_passwords : tuple of ReusedPassword
        Passwords shared across distinct services.
    failed_breach_checks : int
        Number of distinct passwords whose breach lookup failed.
    total_checked : int
        Number of entries carrying a password.
    cancelled : bool
        The run was aborted by the caller; the report is partial.

    """

    weak_entries: Tuple[WeakEntry, ...] = field(default_factory=tuple)
    duplicate_clusters: Tuple[DuplicateCluster, ...] = field(default_factory=tuple)
    breached_entries: Tuple[BreachedEntry, ...] = field(default_factory=tuple)
    reused_passwords: Tuple[ReusedPassword, ...] = field(default_factory=tuple)
    failed_breach_checks: int = 0
    total_checked: int = 0
    cancelled: bool = False

    @property
    def is_clean(self) -> bool:
        return not (
            self.weak_entries
            or self.duplicate_clusters
            or self.breached_entries
            or self.reused_passwords
        )


@dataclass(frozen=True)
class MemberSummary:
    name: str
    url: str
    username: str


@dataclass(frozen=True)
class ClusterSummary:
    service_identity: str
    members: Tuple[MemberSummary, ...]


@dataclass(frozen=True)
class ItemOutcome:
    """What happened to one item during cleanup, and why."""

    name: str
    url: str
    reason: str
    id: Optional[str] = None


@dataclass(frozen=True)
class CleanupReport:
    """Audit trail of one cleanup run.

    With ``dry_run`` set, ``deleted_items`` lists what would have been deleted.
    """

    processed_urls: Tuple[str, ...] = field(default_factory=tuple)
    clusters_found: Tuple[ClusterSummary, ...] = field(default_factory=tuple)
    deleted_items: Tuple[ItemOutcome, ...] = field(default_factory=tuple)
    kept_items: Tuple[ItemOutcome, ...] = field(default_factory=tuple)
    failed_items: Tuple[ItemOutcome, ...] = field(default_factory=tuple)
    cancelled: bool = False
    dry_run: bool = False

    @property
    def deleted_count(self) -> int:
        return len(self.deleted_items)


@dataclass
class CleanupReportBuilder:
    """Mutable accumulator filled while a cleanup runs, frozen by ``build()``."""

    processed_urls: List[str] = field(default_factory=list)
    clusters_found: List[ClusterSummary] = field(default_factory=list)
    deleted_items: List[ItemOutcome] = field(default_factory=list)
    kept_items: List[ItemOutcome] = field(default_factory=list)
    failed_items: List[ItemOutcome] = field(default_factory=list)
    cancelled: bool = False

    def build(self) -> CleanupReport:
        return CleanupReport(
            processed_urls=tuple(self.processed_urls),
            clusters_found=tuple(self.clusters_found),
            deleted_items=tuple(self.deleted_items),
            kept_items=tuple(self.kept_items),
            failed_items=tuple(self.failed_items),
            cancelled=self.cancelled,
        )
