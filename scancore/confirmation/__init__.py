"""
Confirmation Layer

RESPONSIBILITY: Debounce a stream of raw reads into confirmed GTINs
ALLOWED INPUTS: (payload, now, scanning_enabled) per decoded frame
OUTPUTS: ScanOutcome

WHAT THIS LAYER MUST NOT DO:
============================
- Read a system clock
- Schedule timers
- Share state between engine instances
"""

from .engine import (
    COOLDOWN_MS,
    CONFIRMATIONS_REQUIRED,
    WINDOW_DURATION_MS,
    ConfirmationConfig,
    ConfirmationEngine,
)
from .window import ConfirmationWindow, CooldownClock

__all__ = [
    'COOLDOWN_MS',
    'CONFIRMATIONS_REQUIRED',
    'WINDOW_DURATION_MS',
    'ConfirmationConfig',
    'ConfirmationEngine',
    'ConfirmationWindow',
    'CooldownClock',
]
