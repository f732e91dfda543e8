"""
Scan Core Configuration

Unified configuration for a scan session and the API server. Defaults
reproduce the reference tuning; the server reads overrides from the
environment.

ENVIRONMENT:
============
SCANCORE_CONFIRMATIONS      identical reads required (int > 0)
SCANCORE_WINDOW_MS          confirmation window in ms (int > 0)
SCANCORE_COOLDOWN_MS        post-confirmation cooldown in ms (int > 0)
SCANCORE_PAUSE_ON_CONFIRM   pause scanning after a confirmation (bool)
SCANCORE_LOG_LEVEL          logging level name
SCANCORE_AUDIT_MAX_ENTRIES  audit entries kept per session (int > 0)
SCANCORE_MAX_SESSIONS       open API sessions before the idlest is evicted (int > 0)
SCANCORE_SESSION_IDLE_S     seconds before an untouched API session expires (int > 0)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional
import logging
import os

from .confirmation.engine import ConfirmationConfig


_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off'}


def parse_log_level(value: str) -> str:
    """Upper-cased stdlib level name, or ValueError."""
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {value!r}")
    return level


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class ScanCoreConfig:
    """Unified configuration for a scan session."""
    confirmation: ConfirmationConfig = None
    pause_on_confirm: bool = True
    log_level: str = "INFO"
    audit_max_entries: int = 1000
    max_sessions: int = 256
    session_idle_timeout_s: int = 600

    def __post_init__(self):
        self.confirmation = self.confirmation or ConfirmationConfig()
        for name in ('audit_max_entries', 'max_sessions', 'session_idle_timeout_s'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        self.log_level = parse_log_level(self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ScanCoreConfig:
        """Build a config from SCANCORE_* variables, defaults for the rest."""
        environ = os.environ if environ is None else environ
        defaults = ConfirmationConfig()
        confirmation = ConfirmationConfig(
            confirmations_required=_env_int(
                environ, 'SCANCORE_CONFIRMATIONS', defaults.confirmations_required
            ),
            window_duration_ms=_env_int(
                environ, 'SCANCORE_WINDOW_MS', defaults.window_duration_ms
            ),
            cooldown_ms=_env_int(environ, 'SCANCORE_COOLDOWN_MS', defaults.cooldown_ms),
        )
        return cls(
            confirmation=confirmation,
            pause_on_confirm=_env_bool(environ, 'SCANCORE_PAUSE_ON_CONFIRM', True),
            log_level=environ.get('SCANCORE_LOG_LEVEL', 'INFO') or 'INFO',
            audit_max_entries=_env_int(environ, 'SCANCORE_AUDIT_MAX_ENTRIES', 1000),
            max_sessions=_env_int(environ, 'SCANCORE_MAX_SESSIONS', 256),
            session_idle_timeout_s=_env_int(environ, 'SCANCORE_SESSION_IDLE_S', 600),
        )

    def to_dict(self) -> dict:
        return {
            'confirmation': self.confirmation.to_dict(),
            'pause_on_confirm': self.pause_on_confirm,
            'log_level': self.log_level,
            'audit_max_entries': self.audit_max_entries,
            'max_sessions': self.max_sessions,
            'session_idle_timeout_s': self.session_idle_timeout_s,
        }
