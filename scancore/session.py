"""
Scan Session Orchestration

One ScanSession per active camera session. It owns the confirmation
engine, the clock, the audit log and the metrics, and hands confirmed
GTINs to a lookup collaborator.

SESSION FLOW:
=============
1. Camera callback: handle_read(payload)
2. Engine: payload -> Ignored | Pending | Confirmed
3. On Confirmed: pause scanning (if configured), call on_confirmed(gtin)
4. Lookup finished: finish_lookup() re-arms the cooldown
5. Operator taps "Scan Again": resume() clears the window, scanning on

The session is not thread-safe; callers that deliver reads from more
than one thread must serialize calls (the API server holds a lock per
session).
"""

from __future__ import annotations
from collections import deque
from typing import Callable, Deque, List, Optional
import logging

from .config import ScanCoreConfig
from .confirmation.engine import ConfirmationEngine
from .contracts.base import CanonicalGtin
from .contracts.events import AuditEventType, ConfirmedScan, ScanOutcome
from .observability import ScanAuditLog, ScanMetrics
from .temporal.clock import LogicalClock, resolve_now

logger = logging.getLogger(__name__)


ConfirmedHandler = Callable[[CanonicalGtin], None]

# Confirmed scans kept for stats(); older ones are dropped
RECENT_CONFIRMED_SCANS = 100


class ScanSession:
    """
    Per-camera-session wrapper around a ConfirmationEngine.

    The scanning flag lives here, not in the engine; the engine only
    sees it as the scanning_enabled argument.
    """

    def __init__(
        self,
        config: Optional[ScanCoreConfig] = None,
        clock: Optional[LogicalClock] = None,
        on_confirmed: Optional[ConfirmedHandler] = None,
        audit_log: Optional[ScanAuditLog] = None
    ):
        self._config = config or ScanCoreConfig()
        self._clock = clock or LogicalClock.live()
        self._on_confirmed = on_confirmed
        self._engine = ConfirmationEngine(self._config.confirmation)
        self._audit = audit_log or ScanAuditLog(max_entries=self._config.audit_max_entries)
        self._metrics = ScanMetrics()
        self._scanning = True
        self._confirming = False
        self._confirmed: Deque[ConfirmedScan] = deque(maxlen=RECENT_CONFIRMED_SCANS)

    # =========================================================================
    # CAMERA INTERFACE
    # =========================================================================

    def handle_read(self, payload: str, now_ms: Optional[int] = None) -> ScanOutcome:
        """
        Process one decoded frame.

        Returns the engine's outcome unchanged; the collaborator's
        success or failure never alters it.
        """
        now = resolve_now(self._clock, now_ms)
        outcome = self._engine.observe(payload, now, scanning_enabled=self._scanning)

        self._metrics.record(outcome)
        self._audit.record_outcome(outcome, now, payload)
        if not outcome.is_ignored:
            self._confirming = outcome.is_pending

        if outcome.is_confirmed:
            self._confirmed.append(ConfirmedScan(
                gtin=outcome.gtin,
                confirmed_at_ms=now,
                payload=payload,
                symbology=outcome.symbology,
            ))
            if self._config.pause_on_confirm:
                self._scanning = False
            self._dispatch(outcome.gtin, now)

        return outcome

    def _dispatch(self, gtin: CanonicalGtin, now: int) -> None:
        if self._on_confirmed is None:
            return
        try:
            self._on_confirmed(gtin)
        except Exception as e:
            logger.exception(f"[SESSION] Confirmed-scan handler failed for {gtin.value}")
            self._audit.record(
                AuditEventType.ERROR,
                now,
                "handler_failed",
                gtin=gtin.value,
                metadata={'error': f"{type(e).__name__}: {e}"},
            )

    # =========================================================================
    # CONTROL
    # =========================================================================

    def pause(self, now_ms: Optional[int] = None) -> None:
        self._scanning = False
        self._confirming = False
        self._audit.record(AuditEventType.SESSION, resolve_now(self._clock, now_ms), "paused")

    def resume(self, now_ms: Optional[int] = None) -> None:
        """Clear the window and accept reads again. The cooldown still applies."""
        self._engine.reset()
        self._scanning = True
        self._confirming = False
        self._audit.record(AuditEventType.SESSION, resolve_now(self._clock, now_ms), "resumed")

    def finish_lookup(self, now_ms: Optional[int] = None) -> None:
        """Re-arm the cooldown once the lookup round-trip is over."""
        now = resolve_now(self._clock, now_ms)
        self._engine.arm_cooldown(now)
        self._audit.record(AuditEventType.SESSION, now, "lookup_finished")

    # =========================================================================
    # READ-ONLY VIEWS
    # =========================================================================

    @property
    def config(self) -> ScanCoreConfig:
        return self._config

    @property
    def is_scanning(self) -> bool:
        return self._scanning

    @property
    def is_confirming(self) -> bool:
        """True from a Pending outcome until a confirmation, pause or resume."""
        return self._confirming

    @property
    def confirmed_scans(self) -> List[ConfirmedScan]:
        return list(self._confirmed)

    @property
    def audit_log(self) -> ScanAuditLog:
        return self._audit

    @property
    def metrics(self) -> ScanMetrics:
        return self._metrics

    def stats(self) -> dict:
        return {
            'scanning': self._scanning,
            'confirming': self._confirming,
            'engine': self._engine.snapshot().to_dict(),
            'metrics': self._metrics.to_dict(),
            'confirmed': [scan.to_dict() for scan in self._confirmed],
        }
