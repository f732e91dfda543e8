"""
Confirmation State
==================

The two pieces of mutable state the confirmation engine owns exclusively.

INVARIANTS:
===========
- ConfirmationWindow.started_at is None iff the tally is empty
- CooldownClock.last_emission_at, once set, suppresses emission for
  cooldown_ms after it
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..contracts.base import CanonicalGtin


@dataclass
class ConfirmationWindow:
    """Per-candidate read counts inside one rolling time window."""
    tally: Dict[CanonicalGtin, int] = field(default_factory=dict)
    started_at: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not self.tally

    def has_expired(self, now: int, duration_ms: int) -> bool:
        """
        True when a read at `now` may not join this window.

        A `now` earlier than the window start (clock rollback) also
        counts as expired.
        """
        if self.started_at is None:
            return True
        elapsed = now - self.started_at
        return elapsed < 0 or elapsed > duration_ms

    def restart(self, now: int) -> None:
        self.tally = {}
        self.started_at = now

    def clear(self) -> None:
        self.tally = {}
        self.started_at = None

    def increment(self, gtin: CanonicalGtin) -> int:
        count = self.tally.get(gtin, 0) + 1
        self.tally[gtin] = count
        return count

    def counts(self) -> Tuple[Tuple[str, int], ...]:
        return tuple(sorted((gtin.value, count) for gtin, count in self.tally.items()))


@dataclass
class CooldownClock:
    """Timestamp of the last confirmed emission."""
    last_emission_at: Optional[int] = None

    def is_cooling(self, now: int, cooldown_ms: int) -> bool:
        if self.last_emission_at is None:
            return False
        return now - self.last_emission_at < cooldown_ms

    def arm(self, now: int) -> None:
        self.last_emission_at = now
