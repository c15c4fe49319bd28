"""
FastAPI application with database pool lifecycle management.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from archetype_engine.config import settings
from archetype_engine.db.pool import db_pool
from archetype_engine.features.archetypes import archetype_router
from archetype_engine.infrastructure.observability.logging import get_logger, setup_logging
from archetype_engine.routes import health

setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool on startup and close it on shutdown."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    await db_pool.initialize()
    logger.info("All services initialized successfully", services=["database_pool"])

    yield

    logger.info("Application shutting down")
    await db_pool.close()


app = FastAPI(
    title="Conflict Archetype Engine",
    description="Classifies users into conflict-behavior archetypes",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(archetype_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    logger.info(
        "HTTP request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
