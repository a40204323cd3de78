"""Main FastAPI application"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from src.prospect_tool.api.endpoints import health, prospect_import, matching
from src.prospect_tool.config import settings
from src.prospect_tool.services.csv_import import IMPORT_SESSIONS

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Prospect Tool API in {settings.APP_ENV} environment")
    logger.info(
        f"Import settings: batch_size={settings.IMPORT_BATCH_SIZE}, "
        f"store_timeout={settings.STORE_TIMEOUT_SECONDS}s, read_attempts={settings.STORE_READ_ATTEMPTS}"
    )
    
    yield
    
    if IMPORT_SESSIONS:
        logger.info(f"Dropping {len(IMPORT_SESSIONS)} unfinished import sessions")
        IMPORT_SESSIONS.clear()
    logger.info("Shutting down Prospect Tool API")


app = FastAPI(
    title="Prospect Tool - Recruiting Agency Prospecting",
    description="Prospect CSV import with duplicate detection and candidate skill matching",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(health.router, tags=["Health"])
app.include_router(prospect_import.router)
app.include_router(matching.router)


@app.get("/")
def root():
    return {
        "message": "Prospect Tool API",
        "environment": settings.APP_ENV,
        "docs": "/docs"
    }
