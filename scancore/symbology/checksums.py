"""
Check Digit Arithmetic
======================

Mod-10 weighted check digits for the retail symbologies the scanner
accepts, plus the UPC-E to UPC-A expansion.

GUARANTEES:
- Pure integer arithmetic, no floating point
- Every function is total: wrong length or non-digit input yields
  False / None, never an exception
- Indices are 0-based from the left over the digits before the check digit
"""

from __future__ import annotations
from typing import Optional


def _is_digits(code: str, length: int) -> bool:
    return (
        isinstance(code, str)
        and len(code) == length
        and code.isascii()
        and code.isdigit()
    )


def weighted_check_digit(body: str, odd_index_weight: int, even_index_weight: int) -> int:
    """
    Compute (10 - sum mod 10) mod 10 over `body`.

    Digits at odd indices are multiplied by `odd_index_weight`, digits at
    even indices by `even_index_weight`.
    """
    total = 0
    for index, char in enumerate(body):
        weight = odd_index_weight if index % 2 else even_index_weight
        total += int(char) * weight
    return (10 - total % 10) % 10


# =============================================================================
# PER-SYMBOLOGY VALIDATORS
# =============================================================================

def is_valid_ean8(code: str) -> bool:
    if not _is_digits(code, 8):
        return False
    digits = [int(c) for c in code]
    odd = digits[0] + digits[2] + digits[4] + digits[6]
    even = digits[1] + digits[3] + digits[5]
    check = (10 - (odd * 3 + even) % 10) % 10
    return check == digits[7]


def is_valid_ean13(code: str) -> bool:
    if not _is_digits(code, 13):
        return False
    return weighted_check_digit(code[:12], 3, 1) == int(code[12])


def is_valid_upca(code: str) -> bool:
    if not _is_digits(code, 12):
        return False
    return weighted_check_digit(code[:11], 1, 3) == int(code[11])


def is_valid_itf14(code: str) -> bool:
    """ITF-14 uses the EAN-13 weighting (3 on odd indices) over 13 digits."""
    if not _is_digits(code, 14):
        return False
    return weighted_check_digit(code[:13], 3, 1) == int(code[13])


# =============================================================================
# UPC-E
# =============================================================================

def expand_upce_to_upca(upce: str) -> Optional[str]:
    """
    Expand an 8-digit UPC-E (number system 0 or 1) to its 12-digit UPC-A.

    The expansion rule is selected by digit 6:
        0-2: NS d1 d2 d6 0000 d3 d4 d5
        3:   NS d1 d2 d3 00000 d4 d5
        4:   NS d1 d2 d3 d4 00000 d5
        5-9: NS d1 d2 d3 d4 d5 0000 d6

    Returns None when the input is not 8 digits, the number system is
    not 0 or 1, or the UPC-A check digit of the expanded body does not
    equal the UPC-E's own check digit.
    """
    if not _is_digits(upce, 8):
        return None

    number_system = upce[0]
    if number_system not in ('0', '1'):
        return None

    d = upce
    selector = int(d[6])
    if selector <= 2:
        body = f"{number_system}{d[1]}{d[2]}{d[6]}0000{d[3]}{d[4]}{d[5]}"
    elif selector == 3:
        # d4 and d5 both kept; dropping d5 leaves a 10-digit body that never checks
        body = f"{number_system}{d[1]}{d[2]}{d[3]}00000{d[4]}{d[5]}"
    elif selector == 4:
        body = f"{number_system}{d[1]}{d[2]}{d[3]}{d[4]}00000{d[5]}"
    else:
        body = f"{number_system}{d[1]}{d[2]}{d[3]}{d[4]}{d[5]}0000{d[6]}"

    check = weighted_check_digit(body, 1, 3)
    if check != int(d[7]):
        return None
    return f"{body}{check}"


def is_valid_upce(code: str) -> bool:
    """A UPC-E is valid exactly when it expands."""
    return expand_upce_to_upca(code) is not None


# =============================================================================
# CANONICAL FORMS
# =============================================================================

_CANONICAL_VALIDATORS = {
    8: is_valid_ean8,
    13: is_valid_ean13,
    14: is_valid_itf14,
}


def has_valid_check_digit(gtin: str) -> bool:
    """Validate a canonical GTIN-8/13/14 under its own length rule."""
    validator = _CANONICAL_VALIDATORS.get(len(gtin)) if isinstance(gtin, str) else None
    return validator is not None and validator(gtin)
