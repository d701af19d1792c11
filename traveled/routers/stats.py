"""
여행 통계 API
"""

from fastapi import APIRouter, Depends, Query

from ..schemas.stats_schemas import DashboardResponse, PrefectureSummaryResponse
from ..services import stats_service
from ..services.visit_service import VisitService
from .visits import get_visit_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    country_id: str = Query("japan"),
    service: VisitService = Depends(get_visit_service),
):
    """통계 대시보드 (진행률, 유형 분포, 연도별 추이, 광역 지방 완료율)"""
    visits = service.get_visits(country_id)
    return stats_service.build_dashboard(visits, country_id)


@router.get("/prefectures", response_model=PrefectureSummaryResponse)
async def get_prefecture_summary(
    country_id: str = Query("japan"),
    service: VisitService = Depends(get_visit_service),
):
    """도도부현별 요약 (최근 방문, 최고 유형, 첫 방문 연도, 별점)"""
    visits = service.get_visits(country_id)
    ratings = service.get_prefecture_ratings(country_id)
    return {"prefectures": stats_service.summarize_prefectures(visits, ratings)}
