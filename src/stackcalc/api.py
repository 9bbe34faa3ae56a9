"""
FastAPI application and API routes for stackcalc.

Each calculator session lives in memory for the lifetime of the process.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

import structlog
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stackcalc import __version__
from stackcalc.config import settings
from stackcalc.models import PressRequest, PressResult, SessionState
from stackcalc.session import CalculatorSession

logger = structlog.get_logger()


class SessionNotFoundError(LookupError):
    """Raised when no session has the requested id."""
    pass


class SessionLimitError(RuntimeError):
    """Raised when the registry already holds ``max_sessions`` sessions."""
    pass


@dataclass
class SessionEntry:
    """A registered session with its identity."""
    session: CalculatorSession
    session_id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def snapshot(self) -> SessionState:
        return self.session.to_state(session_id=self.session_id, created_at=self.created_at)


class SessionRegistry:
    """In-memory store of calculator sessions keyed by id."""

    def __init__(self, max_sessions: int):
        self.max_sessions = max_sessions
        self._sessions: dict[UUID, SessionEntry] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> SessionEntry:
        if len(self._sessions) >= self.max_sessions:
            raise SessionLimitError(f"Too many open sessions (limit {self.max_sessions})")
        entry = SessionEntry(session=CalculatorSession())
        self._sessions[entry.session_id] = entry
        logger.info("Session created", session_id=str(entry.session_id))
        return entry

    def get(self, session_id: UUID) -> SessionEntry:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Session not found: {session_id}") from None

    def remove(self, session_id: UUID) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        logger.info("Session removed", session_id=str(session_id))


registry = SessionRegistry(settings.max_sessions)


def get_registry() -> SessionRegistry:
    """Dependency returning the process-wide session registry."""
    return registry


app = FastAPI(
    title="stackcalc",
    description="Keypad calculator expression evaluator",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/v1/config")
async def get_config():
    """Get public configuration."""
    return {
        "app_name": settings.app_name,
        "display_precision": settings.display_precision,
        "integer_input": settings.integer_input,
        "operators": ["+", "-", "*", "/", "="],
    }


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(SessionLimitError)
async def session_limit_handler(request: Request, exc: SessionLimitError):
    return JSONResponse(status_code=429, content={"detail": str(exc)})


# =============================================================================
# Sessions API
# =============================================================================

@app.post("/api/v1/sessions", response_model=SessionState, status_code=201)
async def create_session(reg: SessionRegistry = Depends(get_registry)):
    """Open a new calculator with an empty stack."""
    return reg.create().snapshot()


@app.get("/api/v1/sessions/{session_id}", response_model=SessionState)
async def get_session(session_id: UUID, reg: SessionRegistry = Depends(get_registry)):
    """Get display, expression log and pending stack of a session."""
    return reg.get(session_id).snapshot()


@app.post("/api/v1/sessions/{session_id}/press", response_model=PressResult)
async def press_key(
    session_id: UUID,
    press: PressRequest,
    reg: SessionRegistry = Depends(get_registry),
):
    """Press an operator key with the given entry."""
    session = reg.get(session_id).session
    outcome = session.press(press.entry, press.operator)
    return session.to_result(outcome)


@app.post("/api/v1/sessions/{session_id}/clear", response_model=SessionState)
async def clear_session(session_id: UUID, reg: SessionRegistry = Depends(get_registry)):
    """All clear."""
    entry = reg.get(session_id)
    entry.session.all_clear()
    return entry.snapshot()


@app.delete("/api/v1/sessions/{session_id}", status_code=204)
async def delete_session(session_id: UUID, reg: SessionRegistry = Depends(get_registry)):
    """Close a session."""
    reg.remove(session_id)
    return Response(status_code=204)
