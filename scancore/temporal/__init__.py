"""
Temporal Layer

Injectable time and deterministic replay of recorded scan captures.

INVARIANT: nothing in the scan core depends on wall-clock time; every
timestamp is either supplied by the caller or served by LogicalClock.
"""

from .clock import ClockExhausted, LogicalClock, resolve_now
from .replay import (
    CapturedRead,
    CaptureFormatError,
    ReplayResult,
    load_capture,
    parse_capture_line,
    replay_capture,
)

__all__ = [
    'ClockExhausted',
    'LogicalClock',
    'resolve_now',
    'CapturedRead',
    'CaptureFormatError',
    'ReplayResult',
    'load_capture',
    'parse_capture_line',
    'replay_capture',
]
