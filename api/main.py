"""
api/main.py — ticket-intake classification API

Endpoints:
    GET    /health                  → liveness + resolver mode / model status
    POST   /v1/analyze              → full analysis (type, category, urgency,
                                      sentiment, complexity, suggested title)
    POST   /v1/classify/{task}      → one task only

Run API:      uvicorn api.main:app --reload

Set optional env vars in .env:
    INTAKE_MODEL_DIR=/var/lib/intake/models
    INTAKE_RESOLVER_MODE=ensemble      (or "rules")
    INTAKE_EAGER_INIT=1                (train-or-load at startup)
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import asdict

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, HTTPException, Request, status  # noqa: E402
from fastapi.concurrency import run_in_threadpool  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from api.schemas import (  # noqa: E402
    AnalysisOut,
    ClassificationOut,
    ClassifyIn,
    HealthOut,
    TicketText,
)
from intake.config import EAGER_INIT, TASKS  # noqa: E402
from intake.engine import EngineInitializationError  # noqa: E402
from intake.routing.ensemble import EnsembleResolver  # noqa: E402

# ── logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# label field / id field of each task's result
_LABEL_FIELDS = {
    "type": ("type", "type_id"),
    "category": ("category", "category_id"),
    "urgency": ("urgency", None),
    "sentiment": ("sentiment", None),
    "complexity": ("complexity", "score"),
}


def create_app(resolver: EnsembleResolver | None = None, eager_init: bool = EAGER_INIT) -> FastAPI:
    """Build the app around one resolver (a fresh default one when omitted)."""
    resolver = resolver if resolver is not None else EnsembleResolver()
    started = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if eager_init:
            logger.info("Warming up intake models (mode=%s) …", resolver.mode)
            try:
                await run_in_threadpool(resolver.ensure_ready)
                logger.info("Intake models ready.")
            except EngineInitializationError as exc:
                # classification endpoints answer 503 until a retry succeeds
                logger.error("Model initialisation failed: %s", exc)
        yield
        logger.info("Shutdown complete.")

    app = FastAPI(
        title="Ticket Intake Classification Engine",
        description="Classifies French support messages before a ticket is filed.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.resolver = resolver

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EngineInitializationError)
    async def _engine_unavailable(request: Request, exc: EngineInitializationError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": f"Classification models unavailable: {exc}"},
        )

    # ═════════════════════════════════════════════════════════════════════════
    # SYSTEM
    # ═════════════════════════════════════════════════════════════════════════

    @app.get("/health", response_model=HealthOut, tags=["System"])
    def health_check() -> HealthOut:
        """Liveness probe — reports resolver mode and whether models are loaded."""
        engine = resolver.engine
        return HealthOut(
            mode=resolver.mode,
            models_ready=resolver.mode == "rules" or (engine is not None and engine.is_initialized),
            tasks=TASKS,
            uptime_seconds=round(time.time() - started, 3),
        )

    # ═════════════════════════════════════════════════════════════════════════
    # CLASSIFICATION  /v1/...
    # ═════════════════════════════════════════════════════════════════════════

    @app.post("/v1/analyze", response_model=AnalysisOut, tags=["Classification"])
    def analyze(payload: TicketText) -> AnalysisOut:
        """Run every task on one message (after shorthand expansion)."""
        analysis = resolver.analyze(payload.text)
        logger.info(
            "Analyzed: type=%s category=%s urgency=%s",
            analysis.type.type, analysis.category.category, analysis.urgency.urgency,
        )
        return AnalysisOut(**analysis.to_dict())

    @app.post("/v1/classify/{task}", response_model=ClassificationOut, tags=["Classification"])
    def classify(task: str, payload: ClassifyIn) -> ClassificationOut:
        if task not in _LABEL_FIELDS:
            raise HTTPException(status_code=404, detail=f"Unknown task '{task}'. Expected one of {TASKS}.")
        result = asdict(resolver.classify(task, payload.text, payload.ticket_type))
        label_field, id_field = _LABEL_FIELDS[task]
        return ClassificationOut(
            task=task,
            label=result[label_field],
            label_id=result[id_field] if id_field else None,
            confidence=result["confidence"],
            source=result["source"],
        )

    return app


app = create_app()
