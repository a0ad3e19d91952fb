"""Duplicate detection over credential entries.

Entries are bucketed by ``service identity | login identity``. A bucket with
more than one entry is a duplicate cluster, unless every member shares the
same very strong password: such collisions are treated as coincidence, not
reuse. Within a cluster the most complete entry is kept.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from verboselogs import VerboseLogger

from credential_hygiene.analysis.domain import DomainNormalizer
from credential_hygiene.analysis.entropy import estimate_entropy_bits
from credential_hygiene.models.cluster import DuplicateCluster, GroupingResult
from credential_hygiene.models.credential import CredentialEntry, login_identity

DEFAULT_STRONG_THRESHOLD = 80


def rank_members(members: Iterable[CredentialEntry]) -> List[CredentialEntry]:
    """Order entries by completeness, best first; ties keep input order."""
    return sorted(members, key=lambda e: e.completeness, reverse=True)


class CredentialGrouper:
    """Groups credential entries into duplicate clusters.

    Parameters
    ----------
    normalizer : DomainNormalizer, optional
        URL to service identity mapping.
    strong_entropy_threshold : int, optional
        Buckets whose shared password scores above this are not flagged.
        ``None`` disables the exclusion.
    logger : VerboseLogger, optional
        Logger instance.

    """

    def __init__(
        self,
        normalizer: Optional[DomainNormalizer] = None,
        strong_entropy_threshold: Optional[int] = DEFAULT_STRONG_THRESHOLD,
        logger: Optional[VerboseLogger] = None,
    ) -> None:
        self.normalizer = normalizer or DomainNormalizer()
        self.strong_entropy_threshold = strong_entropy_threshold
        self.logger = logger or VerboseLogger(__name__)

    def _is_strong_collision(self, members: List[CredentialEntry]) -> bool:
        if self.strong_entropy_threshold is None:
            return False
        passwords = {m.password for m in members}
        if len(passwords) != 1:
            return False
        (shared,) = passwords
        if shared is None:
            return False
        return estimate_entropy_bits(shared) > self.strong_entropy_threshold

    def group(self, entries: Iterable[CredentialEntry]) -> GroupingResult:
        """Cluster entries by service and login.

        Parameters
        ----------
        entries : Iterable[CredentialEntry]
            The decrypted credential snapshot.

        Returns
        -------
        GroupingResult
            Duplicate clusters plus everything that was set aside and why.

        """
        incomplete: List[CredentialEntry] = []
        skipped_no_url: List[CredentialEntry] = []
        unparseable: List[CredentialEntry] = []
        buckets: Dict[str, tuple[str, str, List[CredentialEntry]]] = {}

        for entry in entries:
            if entry.is_incomplete:
                incomplete.append(entry)
                continue
            if not entry.has_url:
                skipped_no_url.append(entry)
                continue

            service = self.normalizer.base_domain(entry.url)
            if not service:
                self.logger.verbose(
                    f"Unparseable URL for '{entry.name}' (id={entry.id}), excluded from grouping"
                )
                unparseable.append(entry)
                continue

            login = login_identity(entry)
            key = f"{service}|{login}"
            buckets.setdefault(key, (service, login, []))[2].append(entry)

        clusters: List[DuplicateCluster] = []
        singletons: List[DuplicateCluster] = []
        excluded: List[DuplicateCluster] = []

        for service, login, members in buckets.values():
            ranked = rank_members(members)
            if len(ranked) == 1:
                singletons.append(DuplicateCluster(service, login, tuple(ranked)))
                continue
            if self._is_strong_collision(ranked):
                self.logger.debug(
                    f"Not flagging {len(ranked)} entries on {service}: shared password above "
                    f"{self.strong_entropy_threshold} bits"
                )
                excluded.append(DuplicateCluster(service, login, tuple(ranked)))
                singletons.extend(DuplicateCluster(service, login, (m,)) for m in ranked)
                continue
            clusters.append(DuplicateCluster(service, login, tuple(ranked)))

        self.logger.debug(
            f"Grouped entries: clusters={len(clusters)} singletons={len(singletons)} "
            f"incomplete={len(incomplete)} no_url={len(skipped_no_url)} "
            f"unparseable={len(unparseable)} excluded_strong={len(excluded)}"
        )
        return GroupingResult(
            clusters=tuple(clusters),
            singletons=tuple(singletons),
            incomplete=tuple(incomplete),
            skipped_no_url=tuple(skipped_no_url),
            unparseable=tuple(unparseable),
            excluded_strong=tuple(excluded),
        )


def group_credentials(
    entries: Iterable[CredentialEntry],
    strong_entropy_threshold: Optional[int] = DEFAULT_STRONG_THRESHOLD,
) -> GroupingResult:
    """Group entries with the default normalizer."""
    return CredentialGrouper(strong_entropy_threshold=strong_entropy_threshold).group(entries)
