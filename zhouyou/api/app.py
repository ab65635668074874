"""
FastAPI Application - REST API for the board renderer.

Endpoints:
    POST   /api/v1/sessions                         Start a game session
    GET    /api/v1/sessions                         List sessions
    GET    /api/v1/sessions/{id}                    Current snapshot
    DELETE /api/v1/sessions/{id}                    End session
    POST   /api/v1/sessions/{id}/roll               Roll requested
    POST   /api/v1/sessions/{id}/trial/select       Trial option selected
    POST   /api/v1/sessions/{id}/trial/confirm      Trial answer confirmed
    POST   /api/v1/sessions/{id}/modal/acknowledge  Modal acknowledged
    POST   /api/v1/sessions/{id}/pause/acknowledge  Pause acknowledged
    POST   /api/v1/sessions/{id}/ai/confirm         Computer decision confirmed
    POST   /api/v1/sessions/{id}/restart            Restart requested
    GET    /api/v1/health                           Health check

Timed transitions run on each session's scheduler. The service advances
session clocks to wall-clock time before every request, and a background
task pumps all sessions every ZHOUYOU_CLOCK_TICK_MS. Trial generation runs
on a worker pool so a slow LLM call never holds up the event loop.
"""

from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Callable, Union
import asyncio
import logging
import time

from .. import __version__
from ..config import Settings, configure_logging

logger = logging.getLogger(__name__)


def build_service(settings: Settings):
    """Service with an LLM-backed trial generator when a key is configured."""
    from ..generation import AnthropicClient, TrialGenerator
    from ..session import SessionManager
    from .service import GameService

    generator = None
    executor = None
    if settings.anthropic_api_key:
        generator = TrialGenerator(
            AnthropicClient(model=settings.llm_model, api_key=settings.anthropic_api_key)
        )
        executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="trial-generation")
    else:
        logger.info("ANTHROPIC_API_KEY not set; advanced mode will use the static trial deck")
    return GameService(session_manager=SessionManager(generator=generator, executor=executor))


def create_app(service=None, settings: Settings | None = None, pump: bool = True):
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)
        pump: Run the background clock pump while the app is alive

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..engine_core.action import Action
    from .schemas import (
        CreateSessionRequest,
        SelectOptionRequest,
        GameSnapshot,
        IntentResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        ErrorCode,
    )

    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    api_service = service or build_service(settings)

    @asynccontextmanager
    async def lifespan(app):
        task = None
        if pump:
            task = asyncio.create_task(_pump(api_service, settings.clock_tick_ms / 1000))
        try:
            yield
        finally:
            if task is not None:
                task.cancel()
            executor = api_service.session_manager.executor
            if executor is not None:
                executor.shutdown(wait=False, cancel_futures=True)

    app = FastAPI(
        title="Zhouyou API",
        description="""
Turn-based journey of Confucius among the states.

Intents return the snapshot produced by the transition. Timed transitions
(dice, movement, reveals, computer turns) continue on the server; poll
`GET /api/v1/sessions/{id}` to observe them.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_SETUP` | Roster or win condition rejected |
| `GAME_OVER` | The journey is complete |
| `INVALID_STAGE` | Intent not allowed in the current stage |
| `NO_ACTIVE_CARD` | No card is open |
| `NOT_WAITING` | No computer decision awaits confirmation |
| `PLAYER_PAUSED` | Current player must acknowledge the pause |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: str,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    def not_found(session_id: str) -> JSONResponse:
        return make_error_response(
            ErrorCode.SESSION_NOT_FOUND.value,
            f"Session {session_id} not found",
            status_code=404,
        )

    def run_intent(session_id: str, build: Callable[[], Action]) -> Union[IntentResponse, JSONResponse]:
        response = api_service.dispatch(session_id, build())
        if response is None:
            return not_found(session_id)
        if not response.success:
            return JSONResponse(status_code=409, content=response.model_dump())
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=IntentResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid roster"}},
        tags=["Sessions"],
        summary="Start a new journey",
    )
    async def create_session(body: CreateSessionRequest) -> Union[IntentResponse, JSONResponse]:
        session, response = api_service.create_session(body)
        if not response.success:
            return make_error_response(
                response.error_code or ErrorCode.INVALID_SETUP.value,
                response.error or "Invalid setup",
            )
        return response

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameSnapshot,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get the current snapshot",
    )
    async def get_session(session_id: str) -> Union[GameSnapshot, JSONResponse]:
        snapshot = api_service.snapshot(session_id)
        if snapshot is None:
            return not_found(session_id)
        return snapshot

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Intent Endpoints
    # =========================================================================

    intent_responses = {
        404: {"model": ErrorResponse, "description": "Session not found"},
        409: {"model": IntentResponse, "description": "Intent rejected"},
    }

    @app.post(
        "/api/v1/sessions/{session_id}/roll",
        response_model=IntentResponse,
        responses=intent_responses,
        tags=["Turn"],
        summary="Roll the dice",
    )
    async def roll(session_id: str):
        return run_intent(session_id, Action.roll)

    @app.post(
        "/api/v1/sessions/{session_id}/trial/select",
        response_model=IntentResponse,
        responses=intent_responses,
        tags=["Turn"],
        summary="Select a trial option",
    )
    async def select_option(session_id: str, body: SelectOptionRequest):
        return run_intent(session_id, lambda: Action.select_option(body.option_index))

    @app.post(
        "/api/v1/sessions/{session_id}/trial/confirm",
        response_model=IntentResponse,
        responses=intent_responses,
        tags=["Turn"],
        summary="Confirm the selected trial option",
    )
    async def confirm_trial(session_id: str):
        return run_intent(session_id, Action.confirm_trial)

    @app.post(
        "/api/v1/sessions/{session_id}/modal/acknowledge",
        response_model=IntentResponse,
        responses=intent_responses,
        tags=["Turn"],
        summary="Acknowledge the open card",
    )
    async def acknowledge_modal(session_id: str):
        return run_intent(session_id, Action.acknowledge_modal)

    @app.post(
        "/api/v1/sessions/{session_id}/pause/acknowledge",
        response_model=IntentResponse,
        responses=intent_responses,
        tags=["Turn"],
        summary="Acknowledge a skipped turn",
    )
    async def acknowledge_pause(session_id: str):
        return run_intent(session_id, Action.acknowledge_pause)

    @app.post(
        "/api/v1/sessions/{session_id}/ai/confirm",
        response_model=IntentResponse,
        responses=intent_responses,
        tags=["Turn"],
        summary="Confirm a computer player's decision",
    )
    async def confirm_ai_decision(session_id: str):
        return run_intent(session_id, Action.confirm_ai_decision)

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=IntentResponse,
        responses=intent_responses,
        tags=["Sessions"],
        summary="Restart the journey",
    )
    async def restart(session_id: str):
        return run_intent(session_id, Action.restart)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="healthy", service="zhouyou", version=__version__)

    return app


async def _pump(service, interval: float, cleanup_interval: float = 300.0):
    last_cleanup = time.monotonic()
    while True:
        try:
            service.tick_all()
            if time.monotonic() - last_cleanup >= cleanup_interval:
                last_cleanup = time.monotonic()
                removed = service.cleanup_stale_sessions()
                if removed:
                    logger.info("Removed %d finished session(s)", len(removed))
        except Exception:
            logger.exception("Session clock pump failed")
        await asyncio.sleep(interval)
