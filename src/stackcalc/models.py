"""
Core data models for stackcalc.

Defines the operator enum shared by every layer and the request/response
schemas served by the HTTP API.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class Operator(str, Enum):
    """Keypad operator keys, valued by their display symbol."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    EQUALS = "="
    
    @property
    def tier(self) -> int | None:
        """Precedence tier; EQUALS has none."""
        return _TIERS.get(self)
    
    def __str__(self) -> str:
        return self.value


_TIERS = {
    Operator.ADD: 0,
    Operator.SUBTRACT: 0,
    Operator.MULTIPLY: 1,
    Operator.DIVIDE: 1,
}


# =============================================================================
# Session Models
# =============================================================================

class PressRequest(BaseModel):
    """A single keypad press: the entry field contents plus an operator key."""
    entry: str = Field("", max_length=64, description="Text in the entry field")
    operator: Operator


class PressResult(BaseModel):
    """Outcome of a press as seen by a display."""
    display: str
    value: float | None = Field(None, description="Numeric result; null when invalid or not finite")
    invalid: bool = False
    expression: str = ""
    last_was_equals: bool = False
    stack_depth: int = 0


class SessionState(BaseModel):
    """Snapshot of one calculator session."""
    session_id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    display: str = ""
    expression: str = ""
    stack: list[str] = Field(default_factory=list)
    last_was_equals: bool = False
