"""
Contracts Module

Explicit data types exchanged between the symbology, confirmation,
session and API layers. No layer may reach into another layer's
internals; everything crosses a boundary as one of these types.

DESIGN PRINCIPLES:
==================
1. All contract types are immutable (frozen dataclasses or enums)
2. Failure to recognize a payload is data, not an exception
3. Timestamps are integer milliseconds supplied by the caller
"""

from .base import (
    GTIN_LENGTHS,
    CanonicalGtin,
    Error,
    ErrorCode,
    NormalizationResult,
    RawRead,
    Symbology,
)
from .events import (
    AuditEventType,
    AuditLogEntry,
    ConfirmedScan,
    EngineSnapshot,
    IgnoreReason,
    OutcomeKind,
    ScanOutcome,
)

__all__ = [
    'GTIN_LENGTHS',
    'CanonicalGtin',
    'Error',
    'ErrorCode',
    'NormalizationResult',
    'RawRead',
    'Symbology',
    'AuditEventType',
    'AuditLogEntry',
    'ConfirmedScan',
    'EngineSnapshot',
    'IgnoreReason',
    'OutcomeKind',
    'ScanOutcome',
]
