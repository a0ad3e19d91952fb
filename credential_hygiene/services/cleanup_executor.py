"""Duplicate cleanup: delete redundant entries and record why."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from verboselogs import VerboseLogger

from credential_hygiene.analysis.grouper import CredentialGrouper
from credential_hygiene.models import (
    CleanupReport,
    CleanupReportBuilder,
    ClusterSummary,
    CredentialEntry,
    DeleteFunction,
    ItemOutcome,
    MemberSummary,
    ProgressCallback,
)
from credential_hygiene.services.progress import ProgressReporter

NO_URL = "No URL"
REASON_INCOMPLETE = "Missing both username and password"
REASON_SINGLE = "Single entry"
REASON_NOT_GROUPED_NO_URL = "Single entry (no URL, not grouped)"
REASON_NOT_GROUPED_UNPARSEABLE = "Single entry (unparseable URL, not grouped)"
REASON_SAME_ITEM = "Same item as"


@dataclass(frozen=True)
class _PendingDeletion:
    entry: CredentialEntry
    reason: str


def _outcome(entry: CredentialEntry, reason: str) -> ItemOutcome:
    return ItemOutcome(name=entry.name, url=entry.url or NO_URL, reason=reason, id=entry.id)


class CleanupExecutor:
    """Applies the grouper's keep/delete decision through the store's delete function.

    Parameters
    ----------
    grouper : CredentialGrouper, optional
        Duplicate clustering.
    logger : VerboseLogger, optional
        Logger instance.

    """

    def __init__(
        self,
        grouper: Optional[CredentialGrouper] = None,
        logger: Optional[VerboseLogger] = None,
    ) -> None:
        self.logger = logger or VerboseLogger(__name__)
        self.grouper = grouper or CredentialGrouper(logger=self.logger)

    def plan(
        self, entries: List[CredentialEntry], builder: CleanupReportBuilder
    ) -> List[_PendingDeletion]:
        """Decide what to delete, filling the kept/cluster parts of the report.

        Several entries may carry the same store id when the caller re-fetched
        the vault. An id that is kept is never queued for deletion, and each id
        is queued at most once.
        """
        grouping = self.grouper.group(entries)
        kept_names: Dict[str, str] = {}
        candidates: List[_PendingDeletion] = [
            _PendingDeletion(entry, REASON_INCOMPLETE) for entry in grouping.incomplete
        ]

        def keep(entry: CredentialEntry, reason: str) -> None:
            builder.kept_items.append(_outcome(entry, reason))
            kept_names.setdefault(entry.id, entry.name)

        for cluster in grouping.clusters:
            canonical = cluster.canonical
            builder.clusters_found.append(
                ClusterSummary(
                    service_identity=cluster.service_identity,
                    members=tuple(
                        MemberSummary(name=m.name, url=m.url or "", username=m.username or "")
                        for m in cluster.members
                    ),
                )
            )
            keep(canonical, f"Best entry (score: {canonical.completeness})")
            candidates.extend(
                _PendingDeletion(member, f"Duplicate of {canonical.name}")
                for member in cluster.redundant
            )

        for cluster in grouping.singletons:
            keep(cluster.canonical, REASON_SINGLE)
        for entry in grouping.skipped_no_url:
            keep(entry, REASON_NOT_GROUPED_NO_URL)
        for entry in grouping.unparseable:
            keep(entry, REASON_NOT_GROUPED_UNPARSEABLE)

        pending: List[_PendingDeletion] = []
        queued: Set[str] = set()
        for item in candidates:
            entry_id = item.entry.id
            if entry_id in kept_names:
                builder.kept_items.append(
                    _outcome(item.entry, f"{REASON_SAME_ITEM} {kept_names[entry_id]}")
                )
                continue
            if entry_id in queued:
                self.logger.spam(f"Skipping repeated deletion of id={entry_id}")
                continue
            queued.add(entry_id)
            pending.append(item)
        return pending

    def _delete(self, delete_fn: DeleteFunction, item: _PendingDeletion) -> Optional[str]:
        """Run one deletion; return an error description, or None on success."""
        try:
            result = delete_fn(item.entry.id)
        except Exception as err:
            return f"{type(err).__name__}: {err}"
        if result is False:
            return "store refused the deletion"
        return None

    def run_cleanup(
        self,
        entries: Iterable[CredentialEntry],
        delete_fn: DeleteFunction,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> CleanupReport:
        """Delete incomplete and redundant entries.

        Parameters
        ----------
        entries : Iterable[CredentialEntry]
            Decrypted entries from the store.
        delete_fn : callable
            ``delete_fn(id)``; failure is signalled by raising or returning
            ``False``. A failure is recorded and the remaining deletions go on.
        on_progress : callable, optional
            Called as ``on_progress(current, total)`` over the deletions.
        cancel_event : threading.Event, optional
            Checked between deletions.

        Returns
        -------
        CleanupReport
            What was processed, kept, deleted and what failed.

        """
        entries = list(entries)
        builder = CleanupReportBuilder()
        builder.processed_urls.extend(e.url for e in entries if e.url)

        pending = self.plan(entries, builder)
        progress = ProgressReporter(on_progress, len(pending))
        progress.report(0)
        self.logger.info(
            f"Cleanup: {len(pending)} entries to delete, {len(builder.kept_items)} kept"
        )

        for index, item in enumerate(pending, start=1):
            if cancel_event is not None and cancel_event.is_set():
                self.logger.notice(f"Cleanup cancelled after {index - 1}/{len(pending)} deletions")
                builder.cancelled = True
                break
            error = self._delete(delete_fn, item)
            if error is None:
                builder.deleted_items.append(_outcome(item.entry, item.reason))
                self.logger.verbose(f"Deleted '{item.entry.name}' (id={item.entry.id}): {item.reason}")
            else:
                builder.failed_items.append(
                    _outcome(item.entry, f"Deletion failed ({item.reason}): {error}")
                )
                self.logger.error(f"Failed to delete '{item.entry.name}' (id={item.entry.id}): {error}")
            progress.report(index)
        progress.finish()

        report = builder.build()
        self.logger.info(
            f"Cleanup finished: deleted={len(report.deleted_items)} "
            f"failed={len(report.failed_items)} kept={len(report.kept_items)}"
        )
        return report
