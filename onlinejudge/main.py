"""
Main FastAPI application entry point.
Online judge API: problems, users, submissions and judge dispatch.
"""

import logging
import sys
import time
from contextlib import asynccontextmanager

import sqlalchemy as sa
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from onlinejudge.config import get_settings
from onlinejudge.database import engine, init_db
from onlinejudge.api import api_router
from onlinejudge.api.deps import get_dispatcher
from onlinejudge.exceptions import JudgeError
from onlinejudge.middleware.rate_limiter import limiter, rate_limit_exceeded_handler
from onlinejudge.services.dispatcher import Dispatcher

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Verifies the database connection, creates missing tables and builds the
    judge dispatcher shared by all requests.
    """
    max_retries = 5
    for i in range(max_retries):
        try:
            with engine.connect() as conn:
                conn.execute(sa.text("SELECT 1"))
            init_db()
            logger.info("Database connection verified and tables initialized")
            break
        except sa.exc.SQLAlchemyError as e:
            if i < max_retries - 1:
                logger.warning(f"Database connection failed (attempt {i+1}/{max_retries}): {e}")
                time.sleep(2)
            else:
                logger.error(f"Failed to connect to database after {max_retries} attempts: {e}")

    app.state.dispatcher = Dispatcher.from_settings(settings)
    yield
    app.state.dispatcher.close()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    Online judge backend.

    Submissions are stored with a "-" result and pushed as JSON judge
    payloads onto a Redis list named after their language. Language workers
    consume those lists and report verdicts.
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Configure rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(JudgeError)
async def judge_error_handler(request: Request, exc: JudgeError):
    """Translate domain errors into JSON responses."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "detail": exc.message},
    )


# Include API routes
app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint - basic health check."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "healthy",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers."""
    return {"status": "healthy"}


@app.get("/health/queue")
def queue_health(dispatcher: Dispatcher = Depends(get_dispatcher)):
    """Report whether the judge queue answers a ping."""
    if dispatcher.is_available():
        return {"queue": "ok"}
    return JSONResponse(status_code=503, content={"queue": "unavailable"})


if __name__ == "__main__":
    import os
    import uvicorn
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run(
        "onlinejudge.main:app",
        host="0.0.0.0",
        port=port,
        reload=settings.debug,
    )
