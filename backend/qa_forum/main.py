"""FastAPI application entry point."""
from __future__ import annotations
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qa_forum.api import questions
from qa_forum.core.config import LOG_LEVEL, STORAGE_BACKEND
from qa_forum.core.logging_config import setup_logging
from qa_forum.domain.common.errors import (
    InvariantViolationError,
    NotFoundError,
    PermissionDeniedError,
    QAError,
    ValidationError,
)
from qa_forum.persistence.db import init_db

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# App creation
# ------------------------------------------------------------------
app = FastAPI(
    title="Lesson Q&A API",
    description="Questions, answers, votes and accepted answers for course lessons",
    version="1.0.0",
)

# CORS — allow everything for local dev (restrict for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------------
# Startup: initialise DB schema
# ------------------------------------------------------------------
@app.on_event("startup")
def on_startup():
    if STORAGE_BACKEND == "sqlite":
        init_db()
    logger.info("Lesson Q&A API started with %s storage", STORAGE_BACKEND)


# ------------------------------------------------------------------
# Error mapping
# ------------------------------------------------------------------
_STATUS_BY_ERROR = {
    ValidationError: 400,
    PermissionDeniedError: 403,
    NotFoundError: 404,
    InvariantViolationError: 500,
}


@app.exception_handler(QAError)
async def handle_qa_error(request: Request, exc: QAError):
    status_code = _STATUS_BY_ERROR.get(type(exc), 500)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "kind": exc.kind})


# ------------------------------------------------------------------
# Routers
# ------------------------------------------------------------------
app.include_router(questions.router)
