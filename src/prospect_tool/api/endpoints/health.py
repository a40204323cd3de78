"""Liveness check: database reachability and in-flight import sessions"""
import logging
from collections import Counter

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.prospect_tool.database import SessionLocal
from src.prospect_tool.config import settings
from src.prospect_tool.services.csv_import import IMPORT_SESSIONS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def check_database() -> str:
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the database: {e}")
        return f"error: {e}"
    return "connected"


@router.get("/health")
def health_check():
    database = check_database()
    sessions_by_stage = Counter(session.stage for session in IMPORT_SESSIONS.values())
    return {
        "status": "ok" if database == "connected" else "degraded",
        "environment": settings.APP_ENV,
        "database": database,
        "import_sessions": dict(sessions_by_stage),
    }
