"""
통계 대시보드 스키마 정의
"""

from pydantic import BaseModel, Field


class VisitStats(BaseModel):
    total_regions: int
    visited_regions: int
    percentage_visited: int
    rating_breakdown: dict[int, int] = Field(..., description="지역별 최고 방문 유형 기준 분포")
    last_visit: int | None = None


class RatingDistributionItem(BaseModel):
    rating: int
    label: str
    color: str
    count: int


class YearlyData(BaseModel):
    year: int
    visits: int
    new_prefectures: int


class CumulativePoint(BaseModel):
    year: int
    total: int


class MacroRegionCompletion(BaseModel):
    macro_region: str
    name: str
    visited: int
    total: int
    percentage: int


class ScoreSummary(BaseModel):
    total_score: int
    average_rating: float
    total_visits: int


class DashboardResponse(BaseModel):
    stats: VisitStats
    score: ScoreSummary
    rating_distribution: list[RatingDistributionItem]
    yearly: list[YearlyData]
    cumulative: list[CumulativePoint]
    macro_regions: list[MacroRegionCompletion]


class PrefectureSummary(BaseModel):
    region_id: str
    name: str
    name_local: str
    macro_region: str
    most_recent_rating: int
    most_recent_year: int | None = None
    highest_rating: int
    first_visit_year: int | None = None
    visit_count: int
    star_rating: int | None = None


class PrefectureSummaryResponse(BaseModel):
    prefectures: list[PrefectureSummary]
