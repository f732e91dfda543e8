"""
Scan Core: Session API Server
=============================

HTTP surface over scan sessions and the symbology normalizer. Product
lookup is not performed here; clients receive the confirmed GTIN and
call their own lookup service.

Endpoints:
- GET    /health
- POST   /api/v1/normalize                     -> Normalization result
- POST   /api/v1/sessions                      -> New scan session
- GET    /api/v1/sessions/{id}                 -> Session state + metrics
- DELETE /api/v1/sessions/{id}                 -> Close session
- POST   /api/v1/sessions/{id}/reads           -> Scan outcome
- POST   /api/v1/sessions/{id}/pause
- POST   /api/v1/sessions/{id}/resume
- POST   /api/v1/sessions/{id}/lookup-finished

Usage:
    uvicorn scancore.api.server:app --reload
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple
import logging
import threading
import time
import uuid

from fastapi import FastAPI, HTTPException, Response
from pydantic import BaseModel, Field

from ..config import ScanCoreConfig
from ..observability import configure_logging
from ..session import ScanSession
from ..symbology.normalizer import inspect
from .mapper import map_normalization, map_outcome, map_session

logger = logging.getLogger(__name__)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class NormalizeRequest(BaseModel):
    payload: str


class ReadRequest(BaseModel):
    payload: str
    observed_at_ms: Optional[int] = Field(default=None, ge=0)


class ControlRequest(BaseModel):
    observed_at_ms: Optional[int] = Field(default=None, ge=0)


# =============================================================================
# SESSION REGISTRY
# =============================================================================

@dataclass
class _SessionEntry:
    session: ScanSession
    lock: threading.Lock = field(default_factory=threading.Lock)
    last_used: float = 0.0


@dataclass
class SessionRegistry:
    """
    Live sessions keyed by id, each with its own lock.

    A session's engine must never see two reads interleaved, and FastAPI
    runs sync endpoints on a thread pool.

    EVICTION:
    =========
    - A session untouched for session_idle_timeout_s is dropped on the
      next registry access
    - Creating a session past max_sessions drops the least recently used
    """
    config: ScanCoreConfig = field(default_factory=ScanCoreConfig)
    clock: Callable[[], float] = time.monotonic
    _sessions: Dict[str, _SessionEntry] = field(default_factory=dict)
    _guard: threading.Lock = field(default_factory=threading.Lock)

    def _expire_idle(self, now: float) -> None:
        timeout = self.config.session_idle_timeout_s
        idle = [sid for sid, entry in self._sessions.items() if now - entry.last_used > timeout]
        for session_id in idle:
            del self._sessions[session_id]
            logger.info(f"[API] Expired idle session {session_id}")

    def create(self) -> Tuple[str, ScanSession]:
        session_id = f"scan_{uuid.uuid4().hex[:16]}"
        session = ScanSession(self.config)
        with self._guard:
            now = self.clock()
            self._expire_idle(now)
            if len(self._sessions) >= self.config.max_sessions:
                oldest = min(self._sessions, key=lambda sid: self._sessions[sid].last_used)
                del self._sessions[oldest]
                logger.warning(
                    f"[API] Session limit {self.config.max_sessions} reached, evicted {oldest}"
                )
            self._sessions[session_id] = _SessionEntry(session=session, last_used=now)
        return session_id, session

    def get(self, session_id: str) -> Tuple[ScanSession, threading.Lock]:
        with self._guard:
            now = self.clock()
            self._expire_idle(now)
            entry = self._sessions.get(session_id)
            if entry is not None:
                entry.last_used = now
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
        return entry.session, entry.lock

    def remove(self, session_id: str) -> None:
        with self._guard:
            if self._sessions.pop(session_id, None) is None:
                raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")

    def __len__(self) -> int:
        with self._guard:
            self._expire_idle(self.clock())
            return len(self._sessions)


# =============================================================================
# INFRASTRUCTURE SETUP
# =============================================================================

registry: Optional[SessionRegistry] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load configuration from the environment on startup."""
    global registry

    config = ScanCoreConfig.from_env()
    configure_logging(config.log_level)
    registry = SessionRegistry(config=config)
    logger.info(f"[API] Scan core ready with {config.confirmation.to_dict()}")

    yield

    logger.info(f"[API] Shutting down with {len(registry)} open sessions")
    registry = None


app = FastAPI(
    title="Scan Core API",
    version="0.1.0",
    description="Barcode normalization and scan confirmation",
    lifespan=lifespan
)


def _registry() -> SessionRegistry:
    if registry is None:
        raise HTTPException(status_code=503, detail="Scan core not initialized")
    return registry


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
def health_check():
    """System status."""
    return {"status": "online", "sessions": len(_registry())}


@app.post("/api/v1/normalize")
def normalize_payload(request: NormalizeRequest):
    return map_normalization(inspect(request.payload))


@app.post("/api/v1/sessions", status_code=201)
def create_session():
    session_id, session = _registry().create()
    logger.info(f"[API] Opened session {session_id}")
    return map_session(session_id, session)


@app.get("/api/v1/sessions/{session_id}")
def get_session(session_id: str):
    session, lock = _registry().get(session_id)
    with lock:
        return map_session(session_id, session)


@app.delete("/api/v1/sessions/{session_id}", status_code=204)
def close_session(session_id: str):
    _registry().remove(session_id)
    logger.info(f"[API] Closed session {session_id}")
    return Response(status_code=204)


@app.post("/api/v1/sessions/{session_id}/reads")
def submit_read(session_id: str, request: ReadRequest):
    session, lock = _registry().get(session_id)
    with lock:
        outcome = session.handle_read(request.payload, request.observed_at_ms)
        return map_outcome(outcome, session)


@app.post("/api/v1/sessions/{session_id}/pause")
def pause_session(session_id: str, request: Optional[ControlRequest] = None):
    session, lock = _registry().get(session_id)
    with lock:
        session.pause(request.observed_at_ms if request else None)
        return map_session(session_id, session)


@app.post("/api/v1/sessions/{session_id}/resume")
def resume_session(session_id: str, request: Optional[ControlRequest] = None):
    session, lock = _registry().get(session_id)
    with lock:
        session.resume(request.observed_at_ms if request else None)
        return map_session(session_id, session)


@app.post("/api/v1/sessions/{session_id}/lookup-finished")
def lookup_finished(session_id: str, request: Optional[ControlRequest] = None):
    session, lock = _registry().get(session_id)
    with lock:
        session.finish_lookup(request.observed_at_ms if request else None)
        return map_session(session_id, session)
