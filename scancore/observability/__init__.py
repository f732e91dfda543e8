"""
Observability & Audit Layer

RESPONSIBILITY: Logging setup, audit trail, outcome counters
ALLOWED INPUTS: ScanOutcome values and session events
OUTPUTS: AuditLogEntry records, metric dictionaries

WHAT THIS LAYER MUST NOT DO:
============================
- Modify engine or session behavior
- Filter or reinterpret outcomes (only record them)
- Read a clock (timestamps come from the recorder's caller)
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Mapping, Optional
import logging
import sys

from ..contracts.events import AuditEventType, AuditLogEntry, IgnoreReason, ScanOutcome


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_installed_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO", stream=None) -> logging.Logger:
    """
    Install one stream handler on the package logger.

    Calling it again replaces the handler instead of stacking another.
    """
    global _installed_handler

    package_logger = logging.getLogger("scancore")
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)

    if _installed_handler is not None:
        package_logger.removeHandler(_installed_handler)

    _installed_handler = logging.StreamHandler(stream or sys.stderr)
    _installed_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(_installed_handler)
    return package_logger


# =============================================================================
# AUDIT LOG
# =============================================================================

class ScanAuditLog:
    """
    Append-only collector of audit entries for one scan session.

    Entries are never modified after collection. With max_entries set,
    only the most recent entries are kept; sequence numbers keep counting.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self._entries: Deque[AuditLogEntry] = deque(maxlen=max_entries)
        self._sequence: int = 0

    def record(
        self,
        event_type: AuditEventType,
        timestamp_ms: int,
        action: str,
        gtin: Optional[str] = None,
        metadata: Optional[Mapping[str, object]] = None
    ) -> AuditLogEntry:
        self._sequence += 1
        entry = AuditLogEntry(
            sequence=self._sequence,
            event_type=event_type,
            timestamp_ms=timestamp_ms,
            action=action,
            gtin=gtin,
            metadata=tuple(sorted((k, str(v)) for k, v in (metadata or {}).items())),
        )
        self._entries.append(entry)
        return entry

    def record_outcome(self, outcome: ScanOutcome, timestamp_ms: int, payload: str) -> AuditLogEntry:
        event_type = AuditEventType.CONFIRMATION if outcome.is_confirmed else AuditEventType.READ
        metadata = {'payload': payload, 'count': outcome.count}
        if outcome.reason:
            metadata['reason'] = outcome.reason.value
        return self.record(
            event_type=event_type,
            timestamp_ms=timestamp_ms,
            action=outcome.kind.value,
            gtin=outcome.gtin.value if outcome.gtin else None,
            metadata=metadata,
        )

    def get_entries(self, event_type: Optional[AuditEventType] = None) -> List[AuditLogEntry]:
        """Get entries, optionally filtered by type."""
        if event_type is None:
            return list(self._entries)
        return [e for e in self._entries if e.event_type == event_type]

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def max_entries(self) -> Optional[int]:
        return self._entries.maxlen


# =============================================================================
# METRICS
# =============================================================================

@dataclass
class ScanMetrics:
    """Outcome counters for one session or one replay."""
    reads_total: int = 0
    ignored_total: int = 0
    pending_total: int = 0
    confirmed_total: int = 0
    ignored_by_reason: Dict[str, int] = field(
        default_factory=lambda: {reason.value: 0 for reason in IgnoreReason}
    )

    def record(self, outcome: ScanOutcome) -> None:
        self.reads_total += 1
        if outcome.is_confirmed:
            self.confirmed_total += 1
        elif outcome.is_pending:
            self.pending_total += 1
        else:
            self.ignored_total += 1
            self.ignored_by_reason[outcome.reason.value] += 1

    def to_dict(self) -> dict:
        return {
            'reads_total': self.reads_total,
            'ignored_total': self.ignored_total,
            'pending_total': self.pending_total,
            'confirmed_total': self.confirmed_total,
            'ignored_by_reason': dict(self.ignored_by_reason),
        }


__all__ = [
    'LOG_FORMAT',
    'configure_logging',
    'ScanAuditLog',
    'ScanMetrics',
]
