"""FastAPI application entrypoint.

This module builds the question bank API: it configures logging, creates
the tables, optionally seeds them, and mounts the entity controllers.

Endpoints implemented:
- GET|POST /api/{technology,question,answer,asset}
- POST /api/{entity}/list
- GET|PUT|DELETE /api/{entity}/{id}
- GET /health
- GET /error
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlmodel import Session

from . import responses
from .config import settings
from .controllers import answer_router, asset_router, question_router, technology_router
from .database import create_db_and_tables, engine
from .seeds import seed_all

app = FastAPI(title="DevCodeX Question Bank API")
logger = logging.getLogger("app.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

create_db_and_tables()
if settings.SEED_ON_STARTUP:
    with Session(engine) as session:
        seed_all(session)

app.include_router(technology_router)
app.include_router(question_router)
app.include_router(answer_router)
app.include_router(asset_router)

logger.info("question bank API ready (env=%s)", settings.ENV)


def problem_payload(detail: str = "An error occurred processing your request.") -> dict:
    return {
        "type": "about:blank",
        "title": "Internal Server Error",
        "status": 500,
        "detail": detail,
    }


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies, ids and filters as a 400 envelope."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return responses.bad_request("; ".join(parts) or "invalid request")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=problem_payload())


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {
        "status": "Healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENV,
    }


@app.get("/error")
def error():
    """Generic problem payload for failures that reach the boundary."""
    return JSONResponse(status_code=500, content=problem_payload())
