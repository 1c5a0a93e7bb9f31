"""FastAPI application exposing the per-identity tracker operations.

Routes live under ``/trackers/{identity}``. The identity is whatever key
the edge chose for the client: a network address or a fingerprint.

Run with: botguard serve (or uvicorn with ``create_app`` as a factory).
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from botguard import __version__
from botguard.api.schemas import PathRequest, ResetResponse, ScoreRequest
from botguard.config import load_config
from botguard.errors import StoreError
from botguard.scoring.models import (
    BehaviorReport,
    Decision,
    LocaleCheck,
    RateLimitDecision,
    ReputationState,
    ScoreUpdate,
    ViolationRecord,
)
from botguard.storage import create_store
from botguard.tracker import IdentityTracker

logger = logging.getLogger("botguard.api")


def create_app(
    config: dict[str, Any] | None = None,
    tracker: IdentityTracker | None = None,
) -> FastAPI:
    """Build the API around a tracker.

    Args:
        config: Loaded configuration; defaults to ``load_config()``.
        tracker: Pre-built tracker (tests inject one with a fixed clock).
    """
    config = config if config is not None else load_config()
    if tracker is None:
        tracker = IdentityTracker(create_store(config), config)

    app = FastAPI(
        title="botguard",
        description="Per-identity abuse scoring for multi-locale storefronts.",
        version=__version__,
    )
    app.state.tracker = tracker
    app.state.reset_key = config.get("server", {}).get("reset_key")

    _register_error_handlers(app)
    _register_routes(app)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = [str(error.get("msg", "invalid")) for error in exc.errors()]
        return JSONResponse(
            status_code=400,
            content={"detail": "Malformed request body", "errors": messages},
        )

    @app.exception_handler(StoreError)
    async def store_failure(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("State store failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "State store unavailable"},
        )


def _register_routes(app: FastAPI) -> None:
    def tracker_of(request: Request) -> IdentityTracker:
        return request.app.state.tracker

    @app.get("/", tags=["meta"])
    def root() -> dict[str, str]:
        return {"name": "botguard", "version": __version__}

    @app.post("/trackers/{identity}/record-violation", tags=["tracker"])
    def record_violation(identity: str, request: Request) -> ViolationRecord:
        return tracker_of(request).record_violation(identity)

    @app.post("/trackers/{identity}/check-locale", tags=["tracker"])
    def check_locale(identity: str, body: PathRequest, request: Request) -> LocaleCheck:
        return tracker_of(request).check_locale(identity, body.path, body.country)

    @app.post("/trackers/{identity}/track-behavior", tags=["tracker"])
    def track_behavior(identity: str, body: PathRequest, request: Request) -> BehaviorReport:
        return tracker_of(request).track_behavior(identity, body.path)

    @app.post("/trackers/{identity}/rate-limit", tags=["tracker"])
    def rate_limit(identity: str, request: Request) -> RateLimitDecision:
        return tracker_of(request).rate_limit(identity)

    @app.post("/trackers/{identity}/update-score", tags=["tracker"])
    def update_score(identity: str, body: ScoreRequest, request: Request) -> ScoreUpdate:
        overrides = body.config.model_dump(exclude_none=True) if body.config else None
        return tracker_of(request).update_score(identity, body.score_to_add, overrides)

    @app.post("/trackers/{identity}/inspect", tags=["tracker"])
    def inspect(identity: str, body: PathRequest, request: Request) -> Decision:
        return tracker_of(request).inspect(identity, body.path, body.country)

    @app.get("/trackers/{identity}/get-state", tags=["debug"])
    def get_state(identity: str, request: Request) -> ReputationState:
        return tracker_of(request).get_state(identity)

    @app.post("/trackers/{identity}/reset-state", tags=["admin"])
    def reset_state(
        identity: str,
        request: Request,
        key: str = Query(default=""),
    ) -> ResetResponse:
        expected = request.app.state.reset_key
        if not expected or not hmac.compare_digest(key.encode(), str(expected).encode()):
            raise HTTPException(status_code=401, detail="Unauthorized")
        existed = tracker_of(request).reset_state(identity)
        return ResetResponse(reset=True, existed=existed)
