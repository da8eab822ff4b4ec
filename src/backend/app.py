import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.backend.common.config.app_config import config
from src.backend.v4.api.router import app_v4
from src.backend.v4.api.working_days_router import get_holiday_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage FastAPI application lifecycle - startup and shutdown."""
    logger = logging.getLogger(__name__)

    # Startup
    client = get_holiday_client()
    logger.info(
        "Starting working days service (holiday cache TTL %ss, timezone %s)",
        client.cache.ttl_seconds,
        config.WORKING_DAYS_TIMEZONE,
    )
    yield

    # Shutdown
    client.cache.clear()
    logger.info("Working days service shutdown complete")


# Configure logging levels from environment variables
logging.basicConfig(
    level=getattr(logging, config.WORKING_DAYS_LOGGING_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Keep urllib3 connection chatter out of INFO logs.
logging.getLogger("urllib3").setLevel(logging.WARNING)

# Initialize the FastAPI app
app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_SITE_NAME],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# v4 endpoints
app.include_router(app_v4)


@app.get("/health")
async def health():
    return {"status": "ok"}


# Run the app
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.backend.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info",
        access_log=False,
    )
