import logging
from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI

from strip_splitter.api.routes import health, split
from strip_splitter.config import settings

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting strip splitter API")
    logger.info(
        f"Default split settings: {settings.splitting.model_dump()}, "
        f"extensions: {settings.image_extensions}"
    )

    try:
        redis.Redis.from_url(settings.redis_url).ping()
        logger.info(f"Connected to Redis at {settings.redis_url}")
    except redis.RedisError as e:
        logger.error(f"Redis unavailable at {settings.redis_url}: {e}")

    yield

    logger.info("Shutting down strip splitter API")


app = FastAPI(
    title="Strip Splitter API",
    description="Splits tall images into pieces, cutting on quiet rows",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(split.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Strip Splitter API",
        "version": "1.0.0",
        "docs": "/docs",
    }
