"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cli.logging_config import setup_logging
from db import init_db, set_db_path
from errors import AppError
from jobs import job_coordinator
from reflection.store import reap_stale_reflections
from web.deps import get_config
from web.routes import categories, conversations, journal, memory, moods, reflection, scores

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    setup_logging(json_mode=config.logging.json_output, level=config.logging.level)
    if config.paths.db_path:
        set_db_path(config.paths.db_path)
    init_db()
    if config.jobs.reap_on_startup:
        await asyncio.to_thread(reap_stale_reflections, config.jobs.stale_reflection_minutes)
    logger.info("web.startup")
    yield
    await job_coordinator.shutdown(timeout=config.jobs.shutdown_timeout_seconds)
    logger.info("web.shutdown")


app = FastAPI(
    title="InnerTruth",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: allow frontend origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().web.frontend_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("web.app_error", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("web.unhandled_error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"detail": "Internal server error", "code": "INTERNAL_ERROR"})


# Mount routes
app.include_router(reflection.router)
app.include_router(scores.router)
app.include_router(categories.router)
app.include_router(journal.router)
app.include_router(moods.router)
app.include_router(conversations.router)
app.include_router(memory.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
