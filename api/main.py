"""
Manga Panel Gateway - FastAPI application
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from config.settings import SERVER_HOST, SERVER_PORT, LOG_LEVEL
from config.logging_setup import setup_logging
from .routes import router, error_response

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Manga Panel Gateway...")
    yield
    logger.info("Shutting down Manga Panel Gateway...")


app = FastAPI(
    title="Manga Panel Gateway",
    description="Turns uploaded images into manga panels",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same {error} shape as every other failure"""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.warning(f"Invalid request body: {problems}")
    return error_response(f"Invalid request body: {problems}", 400)


app.include_router(router)


def run(host: str = SERVER_HOST, port: int = SERVER_PORT):
    """Run the server."""
    setup_logging(LOG_LEVEL)
    uvicorn.run(app, host=host, port=port, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
