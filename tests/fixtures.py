"""
Scan Core Test Fixtures

Known-good barcode vectors and deterministic read streams.
All fixtures are explicit - no random generation.
"""

from typing import List, Tuple

from scancore.contracts.base import RawRead


# =============================================================================
# BARCODE VECTORS
# =============================================================================

EAN13 = "4006381333931"
EAN13_OTHER = "5901234123457"
UPCA = "036000291452"
UPCA_AS_GTIN13 = "0036000291452"
EAN8 = "96385074"
UPCE = "04252614"
UPCE_AS_UPCA = "042100005264"
UPCE_AS_GTIN13 = "0042100005264"
ITF14 = "10012345678904"

# Valid as EAN-8 and as UPC-E; the EAN-8 rule is tried first.
EAN8_AND_UPCE = "01234565"

INVALID_PAYLOADS = ("", "   ", "abc", "123", "4006381333932", "036000291453")


# =============================================================================
# READ STREAMS (millisecond timestamps)
# =============================================================================

def reads(*pairs: Tuple[str, int]) -> List[RawRead]:
    """Build RawReads from (payload, observed_at_ms) pairs."""
    return [RawRead(payload=p, observed_at_ms=t) for p, t in pairs]


def steady_scan(gtin_payload: str = EAN13, start_ms: int = 0, frames: int = 4,
                frame_interval_ms: int = 33) -> List[RawRead]:
    """A held-steady barcode read at ~30 fps."""
    return reads(*[(gtin_payload, start_ms + i * frame_interval_ms) for i in range(frames)])
