"""
Symbology Layer

RESPONSIBILITY: Raw payload -> canonical GTIN or rejection
ALLOWED INPUTS: Any string
OUTPUTS: NormalizationResult, canonical GTIN strings

WHAT THIS LAYER MUST NOT DO:
============================
- Keep state between calls
- Read a clock
- Raise on malformed camera input
"""

from .checksums import (
    expand_upce_to_upca,
    has_valid_check_digit,
    is_valid_ean8,
    is_valid_ean13,
    is_valid_itf14,
    is_valid_upca,
    is_valid_upce,
    weighted_check_digit,
)
from .normalizer import InvalidBarcodeError, inspect, normalize, validate_manual_entry

__all__ = [
    'expand_upce_to_upca',
    'has_valid_check_digit',
    'is_valid_ean8',
    'is_valid_ean13',
    'is_valid_itf14',
    'is_valid_upca',
    'is_valid_upce',
    'weighted_check_digit',
    'InvalidBarcodeError',
    'inspect',
    'normalize',
    'validate_manual_entry',
]
