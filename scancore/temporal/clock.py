"""
Logical Clock for Deterministic Replay
======================================

Injectable millisecond clock for the scan session.

GUARANTEES:
- Same reads + same tick sequence = identical outcomes
- Never reads system time in replay mode
- Every live tick is logged so a session can be replayed exactly
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional
import json
import time


class ClockExhausted(Exception):
    """Raised when replay clock runs out of ticks."""
    pass


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


@dataclass
class LogicalClock:
    """
    Injectable clock for deterministic execution.

    MODES:
    ======
    1. LIVE mode: reads a monotonic millisecond counter; logs every tick
       only when created with record_ticks=True
    2. REPLAY mode: serves a pre-recorded tick sequence
    """
    _ticks: List[int] = field(default_factory=list)
    _current_index: int = 0
    _is_live: bool = True
    _record_ticks: bool = False

    def now_ms(self) -> int:
        """
        Get current logical time in milliseconds.

        In LIVE mode: reads the monotonic counter, logging it if recording
        In REPLAY mode: returns next tick from recorded sequence
        """
        if self._is_live:
            current = _monotonic_ms()
            if self._record_ticks:
                self._ticks.append(current)
            self._current_index += 1
            return current

        if self._current_index >= len(self._ticks):
            raise ClockExhausted(
                f"Replay clock exhausted at index {self._current_index}. "
                f"Original execution had {len(self._ticks)} ticks."
            )
        tick = self._ticks[self._current_index]
        self._current_index += 1
        return tick

    def tick_count(self) -> int:
        """Number of ticks recorded/consumed."""
        return self._current_index

    def is_live(self) -> bool:
        return self._is_live

    @property
    def ticks(self) -> List[int]:
        return list(self._ticks)

    @classmethod
    def live(cls, record_ticks: bool = False) -> LogicalClock:
        """
        Create clock in LIVE mode.

        Args:
            record_ticks: keep every tick for save_log (one int per call)
        """
        return cls(_is_live=True, _record_ticks=record_ticks)

    @classmethod
    def from_ticks(cls, ticks: Iterable[int]) -> LogicalClock:
        """Create clock in REPLAY mode from an explicit tick sequence."""
        return cls(_ticks=[int(t) for t in ticks], _current_index=0, _is_live=False)

    @classmethod
    def from_log(cls, tick_log_path: Path) -> LogicalClock:
        """
        Create clock in REPLAY mode from recorded log.

        Args:
            tick_log_path: Path to JSON file containing tick sequence
        """
        with open(tick_log_path, 'r') as f:
            data = json.load(f)
        return cls.from_ticks(data['ticks'])

    def save_log(self, tick_log_path: Path) -> None:
        """
        Save tick log for future replay.

        Args:
            tick_log_path: Path to write JSON tick sequence
        """
        tick_log_path = Path(tick_log_path)
        tick_log_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'version': '1.0',
            'mode': 'live' if self._is_live else 'replay',
            'tick_count': len(self._ticks),
            'start_ms': self._ticks[0] if self._ticks else None,
            'end_ms': self._ticks[-1] if self._ticks else None,
            'ticks': list(self._ticks),
        }

        with open(tick_log_path, 'w') as f:
            json.dump(data, f, indent=2)

    def __repr__(self) -> str:
        mode = "LIVE" if self._is_live else "REPLAY"
        return f"LogicalClock({mode}, ticks={len(self._ticks)}, index={self._current_index})"


def resolve_now(clock: Optional[LogicalClock], now_ms: Optional[int]) -> int:
    """Prefer an explicit timestamp, fall back to the clock."""
    if now_ms is not None:
        return now_ms
    if clock is None:
        raise ValueError("No timestamp given and no clock configured")
    return clock.now_ms()
