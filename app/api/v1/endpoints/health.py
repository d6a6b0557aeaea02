from fastapi import APIRouter
from pathlib import Path
from datetime import datetime, timezone
from typing import Dict, Any

from app.core.config import settings

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def health_check():
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready", response_model=Dict[str, Any])
async def readiness_check():
    csv_available = Path(settings.TRANSACTIONS_CSV_PATH).is_file()
    return {
        "status": "ready",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "ledger_api": settings.LIMINAL_BASE_URL,
        "csv_demo_data": "available" if csv_available else "missing",
        "llm": "configured" if settings.ANTHROPIC_API_KEY else "not_configured",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/live", response_model=Dict[str, Any])
async def liveness_check():
    return {
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
