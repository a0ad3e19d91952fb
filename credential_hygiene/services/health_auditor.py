"""Password health audit over a full credential snapshot."""
from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional

from verboselogs import VerboseLogger

from credential_hygiene.analysis.entropy import DEFAULT_WEAK_THRESHOLD, is_weak
from credential_hygiene.analysis.grouper import DEFAULT_STRONG_THRESHOLD, CredentialGrouper
from credential_hygiene.models import (
    BreachedEntry,
    CredentialEntry,
    HealthReport,
    ProgressCallback,
    ReusedPassword,
    WeakEntry,
)
from credential_hygiene.services.breach_oracle import BREACH_CHECK_FAILED, BreachChecker
from credential_hygiene.services.progress import ProgressReporter


class HealthAuditor:
    """Finds weak, duplicated, reused and breached passwords.

    Holds no per-run state: every ``run_audit`` call builds its own breach
    cache, so repeated runs over the same input give equal reports.

    Parameters
    ----------
    oracle : BreachChecker, optional
        Breach lookup capability; ``None`` skips breach checks.
    grouper : CredentialGrouper, optional
        Duplicate clustering.
    weak_threshold : int, optional
        Passwords scoring strictly below this many bits are weak.
    reuse_threshold : int, optional
        Passwords scoring above this many bits are not reported as reused.
        ``None`` reports every reuse.
    logger : VerboseLogger, optional
        Logger instance.

    """

    def __init__(
        self,
        oracle: Optional[BreachChecker],
        grouper: Optional[CredentialGrouper] = None,
        weak_threshold: int = DEFAULT_WEAK_THRESHOLD,
        reuse_threshold: Optional[int] = DEFAULT_STRONG_THRESHOLD,
        logger: Optional[VerboseLogger] = None,
    ) -> None:
        self.logger = logger or VerboseLogger(__name__)
        self.oracle = oracle
        self.grouper = grouper or CredentialGrouper(logger=self.logger)
        self.weak_threshold = weak_threshold
        self.reuse_threshold = reuse_threshold

    def find_reused_passwords(self, entries: Iterable[CredentialEntry]) -> List[ReusedPassword]:
        """Passwords used on two or more distinct services."""
        by_password: Dict[str, List[CredentialEntry]] = {}
        for entry in entries:
            if entry.password:
                by_password.setdefault(entry.password, []).append(entry)

        reused: List[ReusedPassword] = []
        for password, sharing in by_password.items():
            if len(sharing) < 2:
                continue
            bits = sharing[0].entropy
            if self.reuse_threshold is not None and bits > self.reuse_threshold:
                continue
            services: List[str] = []
            for entry in sharing:
                service = self.grouper.normalizer.base_domain(entry.url)
                if service and service not in services:
                    services.append(service)
            if len(services) > 1:
                reused.append(
                    ReusedPassword(
                        service_identities=tuple(services),
                        entries=tuple(sharing),
                        entropy_bits=bits,
                    )
                )
        return reused

    def run_audit(
        self,
        entries: Iterable[CredentialEntry],
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> HealthReport:
        """Audit a credential snapshot.

        Parameters
        ----------
        entries : Iterable[CredentialEntry]
            Decrypted entries from the store.
        on_progress : callable, optional
            Called as ``on_progress(current, total)``: once with 0 before the
            breach checks, after each entry, and finally with ``total``.
        cancel_event : threading.Event, optional
            Checked between entries; once set the run stops and the report
            is marked cancelled.

        Returns
        -------
        HealthReport
            Best-effort report; failed breach lookups only add to
            ``failed_breach_checks``.

        """
        all_entries = list(entries)
        with_password = [e for e in all_entries if e.has_password]
        total = len(with_password)
        progress = ProgressReporter(on_progress, total)
        progress.report(0)
        self.logger.info(f"Auditing {total} passwords ({len(all_entries)} entries)")

        weak: List[WeakEntry] = []
        for entry in with_password:
            bits = entry.entropy
            if is_weak(bits, self.weak_threshold):
                weak.append(WeakEntry(entry=entry, entropy_bits=bits))

        grouping = self.grouper.group(all_entries)
        reused = self.find_reused_passwords(with_password)

        cache = self.oracle.new_cache() if self.oracle is not None else {}
        breached: List[BreachedEntry] = []
        failed_passwords: set[str] = set()
        cancelled = False
        for index, entry in enumerate(with_password, start=1):
            if cancel_event is not None and cancel_event.is_set():
                self.logger.notice(f"Audit cancelled after {index - 1}/{total} entries")
                cancelled = True
                break
            if self.oracle is not None:
                count = self.oracle.check_breach(entry.password, cache)
                if count == BREACH_CHECK_FAILED:
                    failed_passwords.add(entry.password)
                elif count > 0:
                    breached.append(BreachedEntry(entry=entry, breach_count=count))
            progress.report(index)
        progress.finish()

        report = HealthReport(
            weak_entries=tuple(weak),
            duplicate_clusters=grouping.clusters,
            breached_entries=tuple(breached),
            reused_passwords=tuple(reused),
            failed_breach_checks=len(failed_passwords),
            total_checked=total,
            cancelled=cancelled,
        )
        self.logger.info(
            f"Audit finished: weak={len(report.weak_entries)} "
            f"duplicates={len(report.duplicate_clusters)} reused={len(report.reused_passwords)} "
            f"breached={len(report.breached_entries)} failed_checks={report.failed_breach_checks}"
        )
        return report
