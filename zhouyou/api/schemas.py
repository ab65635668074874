"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the renderer and the engine.
Every intent endpoint answers with the post-transition snapshot.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or was ended
- VALIDATION_ERROR: Request body is invalid
- INVALID_SETUP: Roster or win condition rejected at game start
- Engine rejection codes (GAME_OVER, INVALID_STAGE, NO_ACTIVE_CARD, ...)
  are passed through unchanged
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured API error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_SETUP = "INVALID_SETUP"
    INTENT_REJECTED = "INTENT_REJECTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ModeName(str, Enum):
    NORMAL = "normal"
    QUICK = "quick"
    ADVANCED = "advanced"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerSeat(BaseModel):
    """A traveller chosen at game start."""
    player_id: str = Field(min_length=1)
    character: str = Field(min_length=1)
    is_ai: bool = False


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    character: str
    is_ai: bool
    position: int
    meat: int
    is_paused: bool = False
    turns_to_skip: int = 0
    was_paused: bool = False
    has_protection: bool = False
    is_current_turn: bool = False

    model_config = {"from_attributes": True}


class CardInfo(BaseModel):
    """
    The open card, flattened across kinds.

    The answer and analysis of a trial are only present once an option
    has been revealed.
    """
    kind: str = Field(description="trial, fate, chance, event")
    card_id: Optional[str] = None
    title: Optional[str] = None
    text: Optional[str] = None
    quote: Optional[str] = None
    question: Optional[str] = None
    options: list[str] = Field(default_factory=list)
    answer_index: Optional[int] = None
    analysis: Optional[str] = None
    effect_label: Optional[str] = None
    generated: bool = False


class TrialSelectionInfo(BaseModel):
    selected: Optional[int] = None
    revealed: bool = False


class AIDecisionInfo(BaseModel):
    player_id: str
    modal: str
    choice: Optional[int] = None


class MeatAnimationInfo(BaseModel):
    player_id: str
    amount: int
    title: Optional[str] = None


class GameSnapshot(BaseModel):
    """Complete renderer-facing state after a transition."""
    session_id: str
    phase: str
    mode: str
    stage: str
    turn_number: int
    win_condition: int
    current_player_id: Optional[str] = None
    players: list[PlayerInfo] = Field(default_factory=list)
    active_modal: Optional[str] = None
    active_card: Optional[CardInfo] = None
    trial_selection: TrialSelectionInfo = Field(default_factory=TrialSelectionInfo)
    waiting_for_confirmation: bool = False
    ai_decision: Optional[AIDecisionInfo] = None
    generating_trial: bool = False
    reveal: Optional[str] = None
    dice: list[int] = Field(default_factory=lambda: [1, 1])
    meat_animation: Optional[MeatAnimationInfo] = None
    is_busy: bool = False
    is_celebrating: bool = False
    log: list[str] = Field(default_factory=list)
    winner_id: Optional[str] = None
    clock_ms: int = 0
    pending: list[str] = Field(default_factory=list)


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Start a journey."""
    players: list[PlayerSeat] = Field(min_length=2, max_length=6)
    win_condition: int = Field(default=10, ge=1)
    mode: ModeName = ModeName.NORMAL
    seed: Optional[int] = None


class SelectOptionRequest(BaseModel):
    option_index: int = Field(ge=0, le=3)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: str = Field(..., description="Machine-readable error code")
    details: Optional[dict] = None


class IntentResponse(BaseModel):
    """Outcome of an intent plus the snapshot it produced."""
    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    state: GameSnapshot


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
