"""
Scan Session Tests

Covers the camera-session flow around the engine: pause on confirm,
lookup hand-off, Scan Again, and the audit trail.
"""

import pytest

from scancore.config import ScanCoreConfig
from scancore.confirmation.engine import ConfirmationConfig
from scancore.contracts.events import AuditEventType, IgnoreReason
from scancore.observability import ScanAuditLog
from scancore.session import RECENT_CONFIRMED_SCANS, ScanSession
from scancore.temporal.clock import LogicalClock
from tests.fixtures import EAN8, EAN13, EAN13_OTHER


@pytest.fixture
def lookups():
    return []


@pytest.fixture
def session(lookups):
    return ScanSession(on_confirmed=lambda gtin: lookups.append(gtin.value))


class TestConfirmationFlow:

    def test_confirmation_pauses_and_dispatches(self, session, lookups):
        assert session.handle_read(EAN13, 0).is_pending
        assert session.is_confirming

        outcome = session.handle_read(EAN13, 100)

        assert outcome.is_confirmed
        assert lookups == [EAN13]
        assert not session.is_scanning
        assert not session.is_confirming
        assert [scan.gtin.value for scan in session.confirmed_scans] == [EAN13]

    def test_reads_while_paused_are_ignored(self, session, lookups):
        session.handle_read(EAN13, 0)
        session.handle_read(EAN13, 100)

        outcome = session.handle_read(EAN13_OTHER, 5000)

        assert outcome.reason == IgnoreReason.SCANNING_PAUSED
        assert lookups == [EAN13]

    def test_ignored_reads_keep_confirming_hint(self, session):
        session.handle_read(EAN13, 0)
        session.handle_read("noise", 10)

        assert session.is_confirming

    def test_keep_scanning_when_pause_disabled(self, lookups):
        session = ScanSession(
            ScanCoreConfig(pause_on_confirm=False),
            on_confirmed=lambda gtin: lookups.append(gtin.value),
        )
        session.handle_read(EAN13, 0)
        session.handle_read(EAN13, 100)

        assert session.is_scanning
        assert session.handle_read(EAN8, 200).reason == IgnoreReason.COOLING_DOWN
        session.handle_read(EAN8, 1300)
        session.handle_read(EAN8, 1333)
        assert lookups == [EAN13, EAN8]


class TestControl:

    def test_scan_again_resumes_with_empty_window(self, session, lookups):
        session.handle_read(EAN13, 0)
        session.handle_read(EAN13, 100)

        session.resume(3000)

        assert session.is_scanning
        assert session.stats()['engine']['tally'] == {}
        assert session.handle_read(EAN13, 3000).is_pending
        assert session.handle_read(EAN13, 3033).is_confirmed
        assert lookups == [EAN13, EAN13]

    def test_resume_does_not_lift_cooldown(self, session):
        session.handle_read(EAN13, 0)
        session.handle_read(EAN13, 100)
        session.resume(200)

        assert session.handle_read(EAN13, 300).reason == IgnoreReason.COOLING_DOWN

    def test_finish_lookup_rearms_cooldown(self, session):
        session.handle_read(EAN13, 0)
        session.handle_read(EAN13, 100)
        session.finish_lookup(2000)
        session.resume(2000)

        assert session.handle_read(EAN13, 3000).reason == IgnoreReason.COOLING_DOWN
        assert session.handle_read(EAN13, 3200).is_pending

    def test_pause_clears_confirming(self, session):
        session.handle_read(EAN13, 0)
        session.pause(10)

        assert not session.is_scanning
        assert not session.is_confirming


class TestCollaboratorFailure:

    def test_handler_error_is_logged_and_audited(self, caplog):
        def failing_lookup(gtin):
            raise RuntimeError("lookup service down")

        session = ScanSession(on_confirmed=failing_lookup)
        session.handle_read(EAN13, 0)

        outcome = session.handle_read(EAN13, 100)

        assert outcome.is_confirmed
        assert "handler failed" in caplog.text
        errors = session.audit_log.get_entries(AuditEventType.ERROR)
        assert len(errors) == 1
        assert errors[0].gtin == EAN13
        assert dict(errors[0].metadata)['error'] == "RuntimeError: lookup service down"


class TestClockAndAudit:

    def test_uses_injected_clock_when_no_timestamp(self):
        clock = LogicalClock.from_ticks([0, 100, 150])
        session = ScanSession(clock=clock)

        session.handle_read(EAN13)
        session.handle_read(EAN13)
        session.pause()

        entries = session.audit_log.get_entries()
        assert [e.timestamp_ms for e in entries] == [0, 100, 150]
        assert [e.event_type for e in entries] == [
            AuditEventType.READ,
            AuditEventType.CONFIRMATION,
            AuditEventType.SESSION,
        ]
        assert [e.sequence for e in entries] == [1, 2, 3]

    def test_shared_audit_log_is_bounded(self):
        audit = ScanAuditLog(max_entries=2)
        session = ScanSession(audit_log=audit)
        for t in (0, 10, 20):
            session.handle_read("noise", t)

        assert audit.entry_count == 2
        assert [e.timestamp_ms for e in audit.get_entries()] == [10, 20]

    def test_stats_shape(self, session):
        session.handle_read(EAN13, 0)
        session.handle_read("noise", 10)

        stats = session.stats()

        assert stats['scanning'] is True
        assert stats['confirming'] is True
        assert stats['engine'] == {
            'tally': {EAN13: 1},
            'window_started_at': 0,
            'last_emission_at': None,
        }
        assert stats['metrics']['reads_total'] == 2
        assert stats['metrics']['ignored_by_reason']['unrecognized_payload'] == 1
        assert stats['confirmed'] == []


class TestBoundedMemory:

    def test_long_session_keeps_bounded_state(self):
        clock = LogicalClock.live()
        session = ScanSession(ScanCoreConfig(audit_max_entries=50), clock=clock)
        for _ in range(5000):
            session.handle_read("garbage")

        assert session.audit_log.entry_count == 50
        assert session.metrics.reads_total == 5000
        assert clock.ticks == []

    def test_default_audit_log_is_bounded(self):
        assert ScanSession().audit_log.max_entries == ScanCoreConfig().audit_max_entries

    def test_confirmed_history_keeps_most_recent(self):
        config = ScanCoreConfig(
            confirmation=ConfirmationConfig(confirmations_required=1, cooldown_ms=1),
            pause_on_confirm=False,
        )
        session = ScanSession(config)
        for t in range(RECENT_CONFIRMED_SCANS + 50):
            assert session.handle_read(EAN13, t).is_confirmed

        scans = session.confirmed_scans
        assert len(scans) == RECENT_CONFIRMED_SCANS
        assert scans[-1].confirmed_at_ms == RECENT_CONFIRMED_SCANS + 49
        assert session.metrics.confirmed_total == RECENT_CONFIRMED_SCANS + 50
