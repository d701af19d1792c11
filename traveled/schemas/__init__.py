"""
스키마 패키지
모든 Pydantic 스키마를 포함합니다.
"""

from .common import ErrorDetail, ErrorResponse, HealthResponse, SuccessResponse
from .region_schemas import RegionListResponse, RegionResponse
from .share_schemas import (
    PublicShareResponse,
    ShareCreateRequest,
    ShareCreateResponse,
    ShareDetailResponse,
    SharedMapResponse,
    ShareStatusResponse,
    ShareUpdateRequest,
)
from .stats_schemas import DashboardResponse, PrefectureSummaryResponse
from .visit_schemas import (
    PrefectureRatingResponse,
    PrefectureRatingUpsert,
    VisitCreate,
    VisitListResponse,
    VisitResponse,
    VisitUpdate,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "SuccessResponse",
    "RegionListResponse",
    "RegionResponse",
    "PublicShareResponse",
    "ShareCreateRequest",
    "ShareCreateResponse",
    "ShareDetailResponse",
    "SharedMapResponse",
    "ShareStatusResponse",
    "ShareUpdateRequest",
    "DashboardResponse",
    "PrefectureSummaryResponse",
    "PrefectureRatingResponse",
    "PrefectureRatingUpsert",
    "VisitCreate",
    "VisitListResponse",
    "VisitResponse",
    "VisitUpdate",
]
