"""
Event Contracts

Outcome and audit types produced by the confirmation and session layers.
Exactly one ScanOutcome is produced per observed read.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .base import CanonicalGtin, Symbology


# =============================================================================
# SCAN OUTCOME
# =============================================================================

class OutcomeKind(Enum):
    IGNORED = "ignored"
    PENDING = "pending"
    CONFIRMED = "confirmed"


class IgnoreReason(Enum):
    """Why a read did not touch the tally."""
    SCANNING_PAUSED = "scanning_paused"
    COOLING_DOWN = "cooling_down"
    UNRECOGNIZED_PAYLOAD = "unrecognized_payload"


@dataclass(frozen=True)
class ScanOutcome:
    """
    Per-read result of the confirmation engine.

    VARIANTS:
    =========
    - IGNORED: reason set, gtin None, count 0
    - PENDING: gtin is the candidate, count its tally after this read
    - CONFIRMED: gtin is the emitted value, count the tally that reached
      the threshold
    """
    kind: OutcomeKind
    gtin: Optional[CanonicalGtin] = None
    reason: Optional[IgnoreReason] = None
    count: int = 0
    symbology: Optional[Symbology] = None

    @staticmethod
    def ignored(reason: IgnoreReason) -> ScanOutcome:
        return ScanOutcome(kind=OutcomeKind.IGNORED, reason=reason)

    @staticmethod
    def pending(
        gtin: CanonicalGtin,
        count: int,
        symbology: Optional[Symbology] = None
    ) -> ScanOutcome:
        return ScanOutcome(
            kind=OutcomeKind.PENDING, gtin=gtin, count=count, symbology=symbology
        )

    @staticmethod
    def confirmed(
        gtin: CanonicalGtin,
        count: int,
        symbology: Optional[Symbology] = None
    ) -> ScanOutcome:
        return ScanOutcome(
            kind=OutcomeKind.CONFIRMED, gtin=gtin, count=count, symbology=symbology
        )

    @property
    def is_ignored(self) -> bool:
        return self.kind == OutcomeKind.IGNORED

    @property
    def is_pending(self) -> bool:
        return self.kind == OutcomeKind.PENDING

    @property
    def is_confirmed(self) -> bool:
        return self.kind == OutcomeKind.CONFIRMED

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'gtin': self.gtin.value if self.gtin else None,
            'reason': self.reason.value if self.reason else None,
            'count': self.count,
            'symbology': self.symbology.value if self.symbology else None,
        }


@dataclass(frozen=True)
class ConfirmedScan:
    """A confirmed GTIN together with the read that confirmed it."""
    gtin: CanonicalGtin
    confirmed_at_ms: int
    payload: str
    symbology: Optional[Symbology] = None

    def to_dict(self) -> dict:
        return {
            'gtin': self.gtin.value,
            'confirmed_at_ms': self.confirmed_at_ms,
            'payload': self.payload,
            'symbology': self.symbology.value if self.symbology else None,
        }


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only copy of the confirmation engine's private state."""
    tally: Tuple[Tuple[str, int], ...]
    window_started_at: Optional[int]
    last_emission_at: Optional[int]

    def to_dict(self) -> dict:
        return {
            'tally': dict(self.tally),
            'window_started_at': self.window_started_at,
            'last_emission_at': self.last_emission_at,
        }


# =============================================================================
# AUDIT
# =============================================================================

class AuditEventType(Enum):
    """Explicit audit event types."""
    READ = "read"
    CONFIRMATION = "confirmation"
    SESSION = "session"
    ERROR = "error"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable audit log entry."""
    sequence: int
    event_type: AuditEventType
    timestamp_ms: int
    action: str
    gtin: Optional[str] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            'sequence': self.sequence,
            'event_type': self.event_type.value,
            'timestamp_ms': self.timestamp_ms,
            'action': self.action,
            'gtin': self.gtin,
            'metadata': dict(self.metadata),
        }
