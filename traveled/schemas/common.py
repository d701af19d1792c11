"""
공통 응답 스키마 정의
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """에러 상세 정보"""

    field: str | None = Field(None, description="에러 관련 필드명")
    message: str = Field(..., description="에러 메시지")


class ErrorResponse(BaseModel):
    """에러 응답 형식"""

    error: str = Field(..., description="에러 메시지")
    details: list[ErrorDetail] | None = Field(None, description="상세 에러 정보")


class SuccessResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    database: str
    active_shares: int = Field(..., serialization_alias="activeShares")
