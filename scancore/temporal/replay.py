"""
Capture Replay
==============

Feeds a recorded stream of raw reads through a fresh confirmation engine.

INVARIANT: Replay is deterministic.
Same capture + same config = same outcomes, same confirmed scans.

CAPTURE FORMAT:
===============
JSON lines, one read per line:
    {"payload": "4006381333931", "observed_at_ms": 1200}
Blank lines are skipped. Optional "scanning_enabled" (bool, default true).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import json

from ..confirmation.engine import ConfirmationConfig, ConfirmationEngine
from ..contracts.base import RawRead
from ..contracts.events import ConfirmedScan, ScanOutcome
from ..observability import ScanMetrics


class CaptureFormatError(ValueError):
    """Raised when a capture line cannot be parsed into a read."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


@dataclass(frozen=True)
class CapturedRead:
    """A raw read plus the caller's scanning flag at that frame."""
    read: RawRead
    scanning_enabled: bool = True


@dataclass
class ReplayResult:
    """Outcomes of a replay, in input order."""
    outcomes: List[Tuple[RawRead, ScanOutcome]] = field(default_factory=list)
    confirmed: List[ConfirmedScan] = field(default_factory=list)
    metrics: ScanMetrics = field(default_factory=ScanMetrics)

    @property
    def confirmed_gtins(self) -> List[str]:
        return [scan.gtin.value for scan in self.confirmed]

    def to_dict(self) -> dict:
        return {
            'confirmed': [scan.to_dict() for scan in self.confirmed],
            'metrics': self.metrics.to_dict(),
            'outcomes': [
                {'read': read.to_dict(), 'outcome': outcome.to_dict()}
                for read, outcome in self.outcomes
            ],
        }


def parse_capture_line(line: str, line_number: int) -> Optional[CapturedRead]:
    """Parse one capture line; None for blank lines."""
    if not line.strip():
        return None
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise CaptureFormatError(line_number, f"invalid JSON ({e.msg})") from e
    if not isinstance(data, dict):
        raise CaptureFormatError(line_number, "expected a JSON object")

    payload = data.get('payload')
    observed_at = data.get('observed_at_ms')
    scanning_enabled = data.get('scanning_enabled', True)
    if not isinstance(payload, str):
        raise CaptureFormatError(line_number, "'payload' must be a string")
    if isinstance(observed_at, bool) or not isinstance(observed_at, int):
        raise CaptureFormatError(line_number, "'observed_at_ms' must be an integer")
    if not isinstance(scanning_enabled, bool):
        raise CaptureFormatError(line_number, "'scanning_enabled' must be a boolean")

    return CapturedRead(
        read=RawRead(payload=payload, observed_at_ms=observed_at),
        scanning_enabled=scanning_enabled,
    )


def load_capture(path: Path) -> List[CapturedRead]:
    """
    Load a JSON-lines capture file.

    Raises:
        CaptureFormatError: on the first malformed line
    """
    captured = []
    with open(path, 'rb') as f:
        for line_number, raw_line in enumerate(f, start=1):
            try:
                line = raw_line.decode('utf-8')
            except UnicodeDecodeError as e:
                raise CaptureFormatError(
                    line_number, f"invalid UTF-8 ({e.reason} at byte {e.start})"
                ) from e
            entry = parse_capture_line(line, line_number)
            if entry is not None:
                captured.append(entry)
    return captured


def replay_capture(
    reads: Iterable[CapturedRead | RawRead],
    config: Optional[ConfirmationConfig] = None
) -> ReplayResult:
    """Replay reads, in order, through a fresh engine."""
    engine = ConfirmationEngine(config)
    result = ReplayResult()

    for item in reads:
        if isinstance(item, RawRead):
            item = CapturedRead(read=item)
        read = item.read
        outcome = engine.observe_read(read, scanning_enabled=item.scanning_enabled)
        result.outcomes.append((read, outcome))
        result.metrics.record(outcome)
        if outcome.is_confirmed:
            result.confirmed.append(ConfirmedScan(
                gtin=outcome.gtin,
                confirmed_at_ms=read.observed_at_ms,
                payload=read.payload,
                symbology=outcome.symbology,
            ))

    return result
