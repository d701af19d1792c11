"""
헬스체크 API
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import SharedMap
from ..schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(db: Session = Depends(get_db)):
    """DB 연결 확인 및 활성 공유 수 (실패 시 503)"""
    timestamp = datetime.now(UTC)
    try:
        active_shares = (
            db.query(func.count(SharedMap.id))
            .filter(SharedMap.is_active.is_(True))
            .scalar()
        )
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "timestamp": timestamp.isoformat(),
                "database": "disconnected",
                "error": "Database connection failed",
            },
        )

    return HealthResponse(
        status="healthy",
        timestamp=timestamp,
        database="connected",
        active_shares=active_shares or 0,
    )
