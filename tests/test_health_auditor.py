import threading

import pytest

from conftest import FakeOracle, FakeResponse, FakeSession
from credential_hygiene.services.breach_oracle import BreachOracle
from credential_hygiene.services.health_auditor import HealthAuditor

STRONG = "gX9#mK2$pL5@nQ8!vR7&"


@pytest.fixture
def entries(make_entry):
    return [
        make_entry(name="amazon", url="https://www.amazon.co.uk", username="bob", password="password"),
        make_entry(name="amazon shop", url="shop.amazon.co.uk", username="Bob", password="password"),
        make_entry(name="bank", url="https://bank.example.com", username="bob", password=STRONG),
        make_entry(name="forum", url="forum.org", username="bob", password="Tr0ub4dor&3x"),
        make_entry(name="empty", url="nothing.com"),
    ]


def test_full_audit(entries, logger):
    oracle = FakeOracle({"password": 3861493})
    report = HealthAuditor(oracle, logger=logger).run_audit(entries)

    assert report.total_checked == 4
    assert [w.entry.name for w in report.weak_entries] == ["amazon", "amazon shop"]
    assert report.weak_entries[0].entropy_bits == 38
    assert len(report.duplicate_clusters) == 1
    assert report.duplicate_clusters[0].service_identity == "amazon.co.uk"
    assert [b.entry.name for b in report.breached_entries] == ["amazon", "amazon shop"]
    assert report.breached_entries[0].breach_count == 3861493
    # both amazon entries are one service, so this is not reuse
    assert report.reused_passwords == ()
    assert report.failed_breach_checks == 0
    assert not report.cancelled
    assert not report.is_clean


def test_each_password_checked_once_per_run(entries, logger):
    oracle = FakeOracle()
    auditor = HealthAuditor(oracle, logger=logger)
    auditor.run_audit(entries)
    assert sorted(oracle.checked) == sorted({"password", STRONG, "Tr0ub4dor&3x"})
    auditor.run_audit(entries)
    assert len(oracle.checked) == 6


def test_repeated_runs_give_equal_reports(entries, logger):
    auditor = HealthAuditor(FakeOracle({"password": 1}), logger=logger)
    assert auditor.run_audit(entries) == auditor.run_audit(entries)


def test_reused_password_across_services(make_entry, logger):
    entries = [
        make_entry(url="a.com", username="x", password="summer2024"),
        make_entry(url="b.com", username="x", password="summer2024"),
        make_entry(url="www.b.com", username="y", password="summer2024"),
        make_entry(url="c.com", username="x", password=STRONG),
        make_entry(url="d.com", username="x", password=STRONG),
        make_entry(username="x", password="nourl1"),
        make_entry(username="y", password="nourl1"),
    ]
    report = HealthAuditor(None, logger=logger).run_audit(entries)
    (reused,) = report.reused_passwords
    assert reused.service_identities == ("a.com", "b.com")
    assert len(reused.entries) == 3


def test_reuse_threshold_can_be_disabled(make_entry, logger):
    entries = [
        make_entry(url="c.com", username="x", password=STRONG),
        make_entry(url="d.com", username="x", password=STRONG),
    ]
    report = HealthAuditor(None, reuse_threshold=None, logger=logger).run_audit(entries)
    assert len(report.reused_passwords) == 1


def test_failed_lookups_are_counted_not_fatal(make_entry, timeout_error, logger):
    oracle = BreachOracle(session=FakeSession(exc=timeout_error), logger=logger)
    entries = [
        make_entry(url="a.com", username="x", password="password"),
        make_entry(url="b.com", username="y", password="password"),
        make_entry(url="c.com", username="z", password="letmein"),
    ]
    report = HealthAuditor(oracle, logger=logger).run_audit(entries)
    assert report.failed_breach_checks == 2
    assert report.breached_entries == ()
    assert len(report.weak_entries) == 3


def test_audit_with_real_oracle_over_fake_session(make_entry, logger):
    session = FakeSession({"5BAA6": FakeResponse(200, "1E4C9B93F3F0682250B6CF8331B7EE68FD8:10\n")})
    oracle = BreachOracle(session=session, logger=logger)
    report = HealthAuditor(oracle, logger=logger).run_audit(
        [make_entry(url="a.com", username="x", password="password")]
    )
    assert report.breached_entries[0].breach_count == 10


def test_progress_reporting(entries, logger):
    calls = []
    HealthAuditor(FakeOracle(), logger=logger).run_audit(
        entries, on_progress=lambda current, total: calls.append((current, total))
    )
    assert calls[0] == (0, 4)
    assert calls[-1] == (4, 4)
    assert [c for c, _ in calls] == sorted(c for c, _ in calls)


def test_cancelled_audit_is_partial(entries, logger):
    cancel = threading.Event()
    calls = []

    def on_progress(current, total):
        calls.append((current, total))
        if current == 1:
            cancel.set()

    oracle = FakeOracle({"password": 5})
    report = HealthAuditor(oracle, logger=logger).run_audit(
        entries, on_progress=on_progress, cancel_event=cancel
    )
    assert report.cancelled
    assert oracle.checked == ["password"]
    assert len(report.breached_entries) == 1
    assert calls[-1] == (4, 4)


def test_empty_snapshot(logger):
    calls = []
    report = HealthAuditor(FakeOracle(), logger=logger).run_audit(
        [], on_progress=lambda current, total: calls.append((current, total))
    )
    assert report.is_clean
    assert report.total_checked == 0
    assert calls == [(0, 0)]


def test_no_oracle_skips_breach_checks(entries, logger):
    report = HealthAuditor(None, logger=logger).run_audit(entries)
    assert report.breached_entries == ()
    assert report.failed_breach_checks == 0
