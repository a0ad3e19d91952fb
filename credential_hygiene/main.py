"""Credential hygiene command-line entrypoint."""
from __future__ import annotations

from argparse import Namespace
from dataclasses import asdict, replace
from typing import Any, List, Sequence

from verboselogs import VerboseLogger

from credential_hygiene.containers import AppContainer
from credential_hygiene.helpers import dump_to_file, init_logger, parse_options, verbosity_to_level
from credential_hygiene.models import (
    CleanupReport,
    CredentialStore,
    HealthReport,
    coerce_entries,
)
from credential_hygiene.services.cleanup_executor import CleanupExecutor
from credential_hygiene.services.health_auditor import HealthAuditor

SECRET_KEYS = frozenset({"password"})
REDACTED = "********"


def redact_secrets(data: Any) -> Any:
    """Return a copy of JSON-like data with every password value masked."""
    if isinstance(data, dict):
        return {
            key: (REDACTED if key in SECRET_KEYS and value else redact_secrets(value))
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact_secrets(item) for item in data]
    return data


def log_progress(logger: VerboseLogger, label: str):
    """Progress callback logging at verbose level."""

    def _on_progress(current: int, total: int) -> None:
        logger.verbose(f"{label}: {current}/{total}")

    return _on_progress


def summarize_audit(logger: VerboseLogger, report: HealthReport) -> None:
    for weak in report.weak_entries:
        logger.warning(f"Weak password: '{weak.entry.name}' ({weak.entropy_bits} bits)")
    for cluster in report.duplicate_clusters:
        names = ", ".join(m.name for m in cluster.members)
        logger.warning(f"Duplicate logins on {cluster.service_identity}: {names}")
    for reused in report.reused_passwords:
        names = ", ".join(e.name for e in reused.entries)
        logger.warning(
            f"Password reused across {len(reused.service_identities)} services: {names}"
        )
    for breached in report.breached_entries:
        logger.warning(
            f"Breached password: '{breached.entry.name}' seen {breached.breach_count:,} times"
        )
    if report.failed_breach_checks:
        logger.notice(f"{report.failed_breach_checks} breach checks failed, status unknown")
    if report.is_clean:
        logger.success("No weak, duplicate, reused or breached passwords found.")


def summarize_cleanup(logger: VerboseLogger, report: CleanupReport) -> None:
    verb = "Would delete" if report.dry_run else "Deleted"
    for item in report.deleted_items:
        logger.info(f"{verb} '{item.name}' ({item.url}): {item.reason}")
    for item in report.failed_items:
        logger.error(f"Not deleted '{item.name}' ({item.url}): {item.reason}")
    if report.dry_run:
        return
    if report.deleted_count:
        plural = "y" if report.deleted_count == 1 else "ies"
        logger.success(f"Removed {report.deleted_count} login entr{plural}.")
    else:
        logger.info("No logins found to remove.")


def run(
    args: Namespace,
    store: CredentialStore,
    auditor: HealthAuditor,
    executor: CleanupExecutor,
    logger: VerboseLogger,
) -> int:
    """Run the requested command against a store and return the exit code."""
    try:
        entries = coerce_entries(store.list_credentials(), logger=logger)
    except Exception as err:
        logger.error(f"Failed reading credentials: {err}")
        return 1

    report: HealthReport | CleanupReport
    if args.command == "audit":
        if getattr(args, "skip_breach_check", False):
            auditor.oracle = None
        report = auditor.run_audit(entries, on_progress=log_progress(logger, "audit"))
        summarize_audit(logger, report)
    else:
        dry_run_ids: List[str] = []
        delete_fn = dry_run_ids.append if args.dry_run else store.delete_credential
        report = executor.run_cleanup(
            entries, delete_fn, on_progress=log_progress(logger, "cleanup")
        )
        if args.dry_run:
            report = replace(report, dry_run=True)
            logger.notice(f"Dry run: {len(dry_run_ids)} entries would be deleted")
        summarize_cleanup(logger, report)

    if getattr(args, "dump_json", None):
        dump_to_file(logger, args.dump_json, redact_secrets(asdict(report)))

    return 1 if isinstance(report, CleanupReport) and report.failed_items else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Program's entrypoint."""
    args = parse_options("Audit stored credentials and clean up duplicates.", argv)

    container = AppContainer()
    container.logger.override(
        init_logger("credential_hygiene", verbosity_to_level(args.verbose))
    )
    try:
        try:
            store = container.database.credentials_dao()
        except Exception as err:
            container.logger().error(f"Failed connecting to the credential store: {err}")
            return 1
        return run(
            args,
            store=store,
            auditor=container.services.health_auditor(),
            executor=container.services.cleanup_executor(),
            logger=container.logger(),
        )
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    raise SystemExit(main())
