import logging
from fastapi import APIRouter, Depends
from typing import Any
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from issuedesk.core.config import settings
from issuedesk.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=dict[str, Any])
def health_check(db: Session = Depends(get_db)) -> Any:
    """
    Health check endpoint. Reports whether the database answers.
    """
    try:
        db.connection().execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error("Health check database query failed: %s", e)
        database = "unavailable"
    return {
        "status": "ok" if database == "ok" else "degraded",
        "version": settings.VERSION,
        "database": database,
    }
