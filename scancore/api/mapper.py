"""
API Mapper
==========

Transforms internal session state and outcomes into response DTOs.
Plain dictionaries only; no internal type crosses the HTTP boundary.
"""
from typing import Any, Dict

from ..contracts.base import NormalizationResult
from ..contracts.events import ScanOutcome
from ..session import ScanSession


def map_normalization(result: NormalizationResult) -> Dict[str, Any]:
    return result.to_dict()


def map_outcome(outcome: ScanOutcome, session: ScanSession) -> Dict[str, Any]:
    """Outcome plus the session flags the scan screen renders from."""
    dto = outcome.to_dict()
    dto['scanning'] = session.is_scanning
    dto['confirming'] = session.is_confirming
    return dto


def map_session(session_id: str, session: ScanSession) -> Dict[str, Any]:
    dto = {'session_id': session_id, 'config': session.config.to_dict()}
    dto.update(session.stats())
    return dto
