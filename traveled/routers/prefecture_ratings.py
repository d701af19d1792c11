"""
도도부현 별점 API
"""

from fastapi import APIRouter, Depends, Query

from ..exceptions import NotFoundError
from ..schemas.common import SuccessResponse
from ..schemas.visit_schemas import PrefectureRatingResponse, PrefectureRatingUpsert
from ..services.visit_service import VisitService
from .visits import get_visit_service

router = APIRouter(prefix="/prefecture-ratings", tags=["prefecture-ratings"])


@router.get("", response_model=list[PrefectureRatingResponse])
async def list_prefecture_ratings(
    country_id: str = Query("japan"),
    service: VisitService = Depends(get_visit_service),
):
    return service.get_prefecture_ratings(country_id)


@router.get("/{region_id}", response_model=PrefectureRatingResponse)
async def get_prefecture_rating(
    region_id: str,
    country_id: str = Query("japan"),
    service: VisitService = Depends(get_visit_service),
):
    rating = service.get_prefecture_rating(region_id, country_id)
    if rating is None:
        raise NotFoundError("Prefecture rating not found")
    return rating


@router.put("/{region_id}", response_model=PrefectureRatingResponse)
async def upsert_prefecture_rating(
    region_id: str,
    rating_upsert: PrefectureRatingUpsert,
    service: VisitService = Depends(get_visit_service),
):
    """별점 기록 (있으면 갱신, 없으면 생성)"""
    return service.upsert_prefecture_rating(
        region_id, rating_upsert.star_rating, rating_upsert.country_id
    )


@router.delete("/{region_id}", response_model=SuccessResponse)
async def delete_prefecture_rating(
    region_id: str,
    country_id: str = Query("japan"),
    service: VisitService = Depends(get_visit_service),
):
    service.delete_prefecture_rating(region_id, country_id)
    return SuccessResponse()
