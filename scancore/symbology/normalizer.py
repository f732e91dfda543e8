"""
Symbology Normalizer
====================

Maps an arbitrary scanner payload to a canonical GTIN or rejects it.

CANONICAL FORMS:
================
- EAN-8   -> GTIN-8 (as-is)
- UPC-A   -> GTIN-13 ('0' prepended)
- EAN-13  -> GTIN-13 (as-is)
- ITF-14  -> GTIN-14 (as-is)
- UPC-E   -> expanded to UPC-A, then GTIN-13

Code128/39/93 may carry a GTIN among other characters. When nothing
matches, non-digits are stripped and the digit run is tried once more.
That fallback can accept an unrelated digit run that happens to pass a
shorter checksum; matches found this way are flagged with
`from_embedded_digits` so callers can tell them apart.

GUARANTEES:
- Never raises on any input
- No state, no clock
- The stripping fallback runs at most once
"""

from __future__ import annotations
import logging
import re
from typing import Optional, Tuple

from ..contracts.base import CanonicalGtin, ErrorCode, NormalizationResult, Symbology
from .checksums import (
    expand_upce_to_upca,
    is_valid_ean8,
    is_valid_ean13,
    is_valid_itf14,
    is_valid_upca,
)

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D+", re.ASCII)
_SUPPORTED_LENGTHS = (8, 12, 13, 14)


class InvalidBarcodeError(ValueError):
    """Raised when a hand-typed barcode does not normalize."""

    def __init__(self, code: str, result: NormalizationResult):
        super().__init__("Please enter a valid barcode.")
        self.code = code
        self.result = result


def _is_ascii_digits(data: str) -> bool:
    return data.isascii() and data.isdigit()


def _match(data: str) -> Optional[Tuple[str, Symbology]]:
    """Try the standard GTIN forms against a trimmed payload."""
    if _is_ascii_digits(data):
        length = len(data)
        if length == 8 and is_valid_ean8(data):
            return data, Symbology.EAN_8
        if length == 12 and is_valid_upca(data):
            return f"0{data}", Symbology.UPC_A
        if length == 13 and is_valid_ean13(data):
            return data, Symbology.EAN_13
        if length == 14 and is_valid_itf14(data):
            return data, Symbology.ITF_14

    # UPC-E is reported as its 8-digit form, check digit included
    if len(data) == 8:
        upca = expand_upce_to_upca(data)
        if upca is not None:
            return f"0{upca}"[:13], Symbology.UPC_E

    return None


def inspect(raw: Optional[str]) -> NormalizationResult:
    """
    Normalize a payload and report how it matched or why it did not.

    Args:
        raw: Decoded payload from the camera reader (None tolerated)

    Returns:
        NormalizationResult with either a GTIN or an Error
    """
    payload = raw if isinstance(raw, str) else ""
    data = payload.strip()
    if not data:
        return NormalizationResult.failure(
            payload, ErrorCode.EMPTY_PAYLOAD, "Payload is empty"
        )

    matched = _match(data)
    if matched:
        value, symbology = matched
        return NormalizationResult.success(payload, CanonicalGtin(value), symbology)

    digits = _NON_DIGITS.sub("", data)
    if digits and digits != data:
        # digits is a fixed point of the strip; one retry only
        matched = _match(digits)
        if matched:
            value, symbology = matched
            logger.debug(
                f"[NORMALIZER] Accepted embedded digit run {digits!r} "
                f"from payload {data!r} as {symbology.value}"
            )
            return NormalizationResult.success(
                payload, CanonicalGtin(value), symbology, from_embedded_digits=True
            )

    if not digits:
        return NormalizationResult.failure(
            payload, ErrorCode.NO_DIGITS, "Payload contains no decimal digits"
        )
    if len(digits) not in _SUPPORTED_LENGTHS:
        return NormalizationResult.failure(
            payload,
            ErrorCode.UNSUPPORTED_LENGTH,
            f"{len(digits)} digits is not a GTIN length"
        )
    return NormalizationResult.failure(
        payload,
        ErrorCode.CHECKSUM_MISMATCH,
        f"No symbology check digit matches {digits}"
    )


def normalize(raw: Optional[str]) -> Optional[str]:
    """Return the canonical GTIN for `raw`, or None if unsupported."""
    result = inspect(raw)
    return result.gtin.value if result.is_success else None


def validate_manual_entry(code: str) -> str:
    """
    Normalize a barcode typed in by hand.

    A failure here is shown to a person, so it raises.

    Raises:
        InvalidBarcodeError: if the code does not normalize
    """
    result = inspect(code)
    if not result.is_success:
        raise InvalidBarcodeError(code, result)
    return result.gtin.value
