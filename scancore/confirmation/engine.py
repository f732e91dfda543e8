"""
Confirmation Engine
===================

Turns a noisy frame-rate stream of raw reads into at most one confirmed
GTIN per physical scan.

STATE:
======
- Idle: tally empty
- Accumulating: tally non-empty, window active
- Cooling (orthogonal): active for cooldown_ms after every confirmation

Counts are kept per canonical value, so a scanner alternating between
the true code and a misread never confirms either by their combined
total; each candidate must reach the threshold on its own.

GUARANTEES:
===========
- Time is always the caller's `now`; the engine never reads a clock
- One call, one outcome; no suspension point inside observe()
- Not safe for concurrent callers without external mutual exclusion
- Malformed reads never touch the tally

CLOCK ROLLBACK:
===============
- now < window start: the window counts as expired, a fresh one begins
- now < last emission: the read is ignored and the cooldown is
  re-anchored at now, so it lasts at most cooldown_ms of forward time
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Optional

from ..contracts.base import NormalizationResult, RawRead
from ..contracts.events import EngineSnapshot, IgnoreReason, ScanOutcome
from ..symbology.normalizer import inspect
from .window import ConfirmationWindow, CooldownClock

logger = logging.getLogger(__name__)


# Reference tuning
CONFIRMATIONS_REQUIRED = 2
WINDOW_DURATION_MS = 1200
COOLDOWN_MS = 1200


@dataclass(frozen=True)
class ConfirmationConfig:
    """Fixed at engine construction. All values are positive integers."""
    confirmations_required: int = CONFIRMATIONS_REQUIRED
    window_duration_ms: int = WINDOW_DURATION_MS
    cooldown_ms: int = COOLDOWN_MS

    def __post_init__(self):
        for name in ('confirmations_required', 'window_duration_ms', 'cooldown_ms'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def to_dict(self) -> dict:
        return {
            'confirmations_required': self.confirmations_required,
            'window_duration_ms': self.window_duration_ms,
            'cooldown_ms': self.cooldown_ms,
        }


class ConfirmationEngine:
    """
    Rolling-window threshold confirmation with a post-emission cooldown.

    The embedding application owns exactly one instance per active camera
    session.
    """

    def __init__(self, config: Optional[ConfirmationConfig] = None):
        self._config = config or ConfirmationConfig()
        self._window = ConfirmationWindow()
        self._cooldown = CooldownClock()

    @property
    def config(self) -> ConfirmationConfig:
        return self._config

    def observe(self, raw: str, now: int, scanning_enabled: bool = True) -> ScanOutcome:
        """
        Process one decoded frame.

        Args:
            raw: Decoded payload, any symbology
            now: Caller-supplied time in milliseconds
            scanning_enabled: False while the caller has paused scanning

        Returns:
            Exactly one of Ignored, Pending or Confirmed
        """
        if not scanning_enabled:
            return ScanOutcome.ignored(IgnoreReason.SCANNING_PAUSED)

        last = self._cooldown.last_emission_at
        if last is not None and now < last:
            logger.warning(
                f"[CONFIRM] Clock moved back {last - now}ms behind last emission; "
                f"re-anchoring cooldown"
            )
            self._cooldown.arm(now)
            return ScanOutcome.ignored(IgnoreReason.COOLING_DOWN)
        if self._cooldown.is_cooling(now, self._config.cooldown_ms):
            return ScanOutcome.ignored(IgnoreReason.COOLING_DOWN)

        return self._advance(inspect(raw), now)

    def observe_read(self, read: RawRead, scanning_enabled: bool = True) -> ScanOutcome:
        return self.observe(read.payload, read.observed_at_ms, scanning_enabled)

    def _advance(self, result: NormalizationResult, now: int) -> ScanOutcome:
        if not result.is_success:
            return ScanOutcome.ignored(IgnoreReason.UNRECOGNIZED_PAYLOAD)

        window = self._window
        if window.is_empty or window.has_expired(now, self._config.window_duration_ms):
            if not window.is_empty:
                logger.debug(
                    f"[CONFIRM] Window from {window.started_at} expired at {now}, "
                    f"discarding tally {dict(window.counts())}"
                )
            window.restart(now)

        gtin = result.gtin
        count = window.increment(gtin)

        if count >= self._config.confirmations_required:
            window.clear()
            self._cooldown.arm(now)
            logger.info(
                f"[CONFIRM] Confirmed {gtin.value} after {count} reads "
                f"({result.symbology.value})"
            )
            return ScanOutcome.confirmed(gtin, count, result.symbology)

        return ScanOutcome.pending(gtin, count, result.symbology)

    def reset(self) -> None:
        """Empty the window. The cooldown is left as it is."""
        self._window.clear()

    def arm_cooldown(self, now: int) -> None:
        """Start a cooldown at `now` without emitting."""
        self._cooldown.arm(now)

    def is_cooling(self, now: int) -> bool:
        return self._cooldown.is_cooling(now, self._config.cooldown_ms)

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            tally=self._window.counts(),
            window_started_at=self._window.started_at,
            last_emission_at=self._cooldown.last_emission_at,
        )

    def __repr__(self) -> str:
        return (
            f"ConfirmationEngine(required={self._config.confirmations_required}, "
            f"window={self._config.window_duration_ms}ms, "
            f"cooldown={self._config.cooldown_ms}ms)"
        )
