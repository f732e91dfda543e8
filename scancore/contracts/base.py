"""
Base Contracts and Shared Types

The value types every layer of the scan core exchanges.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- This module imports nothing from the other layers
- All types are frozen dataclasses or enums
- A CanonicalGtin that exists is always checksum-valid
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


GTIN_LENGTHS = (8, 13, 14)


# =============================================================================
# ERROR STATES (Data, never raised from the hot path)
# =============================================================================

class ErrorCode(Enum):
    """
    Sub-kinds of an unrecognized payload.

    Camera streams emit partial and garbled frames all the time, so these
    are steady-state outcomes, not faults.
    """
    EMPTY_PAYLOAD = auto()
    NO_DIGITS = auto()
    UNSUPPORTED_LENGTH = auto()
    CHECKSUM_MISMATCH = auto()


@dataclass(frozen=True)
class Error:
    """Immutable error representation. Errors are data, not exceptions."""
    code: ErrorCode
    message: str


# =============================================================================
# SYMBOLOGY
# =============================================================================

class Symbology(Enum):
    """The symbology rule that produced a canonical GTIN."""
    EAN_8 = "ean8"
    UPC_A = "upc_a"
    EAN_13 = "ean13"
    ITF_14 = "itf14"
    UPC_E = "upc_e"


@dataclass(frozen=True)
class CanonicalGtin:
    """
    A checksum-valid GTIN-8, GTIN-13 or GTIN-14.

    Two reads of the same item through different symbologies (UPC-A and
    EAN-13 for instance) canonicalize to equal values, which is what lets
    the confirmation tally count them together.
    """
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ValueError("CanonicalGtin value must be a string")
        if len(self.value) not in GTIN_LENGTHS:
            raise ValueError(
                f"CanonicalGtin must have 8, 13 or 14 digits, got {len(self.value)}"
            )
        if not (self.value.isascii() and self.value.isdigit()):
            raise ValueError("CanonicalGtin must contain only ASCII digits")
        from ..symbology.checksums import has_valid_check_digit

        if not has_valid_check_digit(self.value):
            raise ValueError(f"CanonicalGtin check digit mismatch: {self.value}")

    @property
    def length(self) -> int:
        return len(self.value)

    def __str__(self) -> str:
        return self.value


# =============================================================================
# INPUT
# =============================================================================

@dataclass(frozen=True)
class RawRead:
    """One decoded frame from the camera reader. Borrowed per call."""
    payload: str
    observed_at_ms: int

    def __post_init__(self):
        if not isinstance(self.payload, str):
            raise ValueError("RawRead payload must be a string")
        if isinstance(self.observed_at_ms, bool) or not isinstance(self.observed_at_ms, int):
            raise ValueError("RawRead observed_at_ms must be an integer millisecond timestamp")

    def to_dict(self) -> dict:
        return {
            'payload': self.payload,
            'observed_at_ms': self.observed_at_ms,
        }


# =============================================================================
# NORMALIZATION RESULT
# =============================================================================

@dataclass(frozen=True)
class NormalizationResult:
    """
    Result of normalizing one payload.
    Either contains a GTIN OR an error, never both.
    """
    payload: str
    gtin: Optional[CanonicalGtin] = None
    symbology: Optional[Symbology] = None
    from_embedded_digits: bool = False
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None and self.gtin is not None

    @staticmethod
    def success(
        payload: str,
        gtin: CanonicalGtin,
        symbology: Symbology,
        from_embedded_digits: bool = False
    ) -> NormalizationResult:
        return NormalizationResult(
            payload=payload,
            gtin=gtin,
            symbology=symbology,
            from_embedded_digits=from_embedded_digits
        )

    @staticmethod
    def failure(payload: str, code: ErrorCode, message: str) -> NormalizationResult:
        return NormalizationResult(payload=payload, error=Error(code=code, message=message))

    def to_dict(self) -> dict:
        return {
            'payload': self.payload,
            'gtin': self.gtin.value if self.gtin else None,
            'symbology': self.symbology.value if self.symbology else None,
            'from_embedded_digits': self.from_embedded_digits,
            'error_code': self.error.code.name if self.error else None,
        }
