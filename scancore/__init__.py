"""
Scan Core

Barcode normalization and scan confirmation for a camera barcode reader.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Immutable value types shared by every layer
   - CanonicalGtin, RawRead, NormalizationResult, ScanOutcome

2. SYMBOLOGY LAYER (symbology/)
   - Responsibility: raw payload -> canonical GTIN or rejection
   - Outputs: NormalizationResult
   - MUST NOT: keep state, read a clock, raise on camera input

3. CONFIRMATION LAYER (confirmation/)
   - Responsibility: debounce reads into at most one emission per scan
   - Allowed inputs: payload + caller-supplied now + scanning flag
   - Outputs: ScanOutcome (Ignored | Pending | Confirmed)

4. TEMPORAL LAYER (temporal/)
   - Injectable LogicalClock, deterministic capture replay

5. SESSION (session.py)
   - One ScanSession per camera session: scanning flag, lookup hand-off

6. OBSERVABILITY & AUDIT LAYER (observability/)
   - Logging setup, append-only audit log, outcome counters

7. API (api/)
   - FastAPI surface; product lookup stays with the client

CONSTRAINTS ENFORCED:
=====================
- Deterministic: identical reads and timestamps give identical outcomes
- No ambient time: every timestamp is an explicit argument
- Unrecognized payloads are outcomes, never exceptions
"""

from .config import ScanCoreConfig
from .confirmation import ConfirmationConfig, ConfirmationEngine
from .contracts import (
    CanonicalGtin,
    IgnoreReason,
    NormalizationResult,
    OutcomeKind,
    RawRead,
    ScanOutcome,
    Symbology,
)
from .session import ScanSession
from .symbology import InvalidBarcodeError, inspect, normalize, validate_manual_entry

__version__ = "0.1.0"

__all__ = [
    'ScanCoreConfig',
    'ConfirmationConfig',
    'ConfirmationEngine',
    'CanonicalGtin',
    'IgnoreReason',
    'NormalizationResult',
    'OutcomeKind',
    'RawRead',
    'ScanOutcome',
    'Symbology',
    'ScanSession',
    'InvalidBarcodeError',
    'inspect',
    'normalize',
    'validate_manual_entry',
]
