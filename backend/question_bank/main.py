"""Question Bank API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers render every failure as the error envelope; they are
      registered before CORSMiddleware so it wraps every response
    - CORS origins, headers and methods come from settings
    - Database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from question_bank.api.error_handlers import register_error_handlers
from question_bank.api.routes import health, questions, topics
from question_bank.config import get_settings
from question_bank.infrastructure import database
from question_bank.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Question Bank API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Question Bank API shutting down")


app = FastAPI(
    title="Question Bank API", version="1.0.0", lifespan=lifespan,
)

# Added first so CORSMiddleware wraps every error response, 500s included
register_error_handlers(app)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.include_router(health.router)
app.include_router(questions.router)
app.include_router(topics.router)
