"""
방문 기록 API
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import AuthUser, get_current_user
from ..database import get_db
from ..exceptions import NotFoundError
from ..schemas.common import SuccessResponse
from ..schemas.visit_schemas import (
    VisitCreate,
    VisitListResponse,
    VisitResponse,
    VisitUpdate,
)
from ..services.visit_service import VisitService

router = APIRouter(prefix="/visits", tags=["visits"])


def get_visit_service(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
) -> VisitService:
    return VisitService(db, current_user.id)


@router.get("", response_model=VisitListResponse)
async def list_visits(
    country_id: str | None = Query(None, description="국가 필터 (예: japan)"),
    service: VisitService = Depends(get_visit_service),
):
    """사용자 방문 기록 목록"""
    visits = service.get_visits(country_id)
    return VisitListResponse(
        visits=[VisitResponse.model_validate(v) for v in visits],
        total=len(visits),
    )


@router.post("", response_model=VisitResponse, status_code=201)
async def create_visit(
    visit_create: VisitCreate,
    service: VisitService = Depends(get_visit_service),
):
    return service.add_visit(visit_create)


@router.get("/by-region/{region_id}", response_model=VisitResponse)
async def get_visit_by_region(
    region_id: str,
    year: int | None = Query(None, description="방문 연도 (없으면 가장 최근 기록)"),
    country_id: str = Query("japan"),
    service: VisitService = Depends(get_visit_service),
):
    visit = service.get_visit_by_region(region_id, year, country_id)
    if visit is None:
        raise NotFoundError("Visit not found")
    return visit


@router.get("/{visit_id}", response_model=VisitResponse)
async def get_visit(
    visit_id: str,
    service: VisitService = Depends(get_visit_service),
):
    return service.get_visit(visit_id)


@router.patch("/{visit_id}", response_model=VisitResponse)
async def update_visit(
    visit_id: str,
    visit_update: VisitUpdate,
    service: VisitService = Depends(get_visit_service),
):
    return service.update_visit(visit_id, visit_update)


@router.delete("/{visit_id}", response_model=SuccessResponse)
async def delete_visit(
    visit_id: str,
    service: VisitService = Depends(get_visit_service),
):
    service.delete_visit(visit_id)
    return SuccessResponse()
