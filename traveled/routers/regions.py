"""
도도부현 기준 데이터 API (인증 불필요)
"""

from fastapi import APIRouter, Query

from ..data.japan import get_all_prefectures, get_prefecture, search_prefectures
from ..exceptions import NotFoundError
from ..schemas.region_schemas import RegionListResponse, RegionResponse

router = APIRouter(prefix="/regions", tags=["regions"])


def _to_response(prefecture: dict) -> RegionResponse:
    col, row = prefecture["grid"]
    return RegionResponse(
        id=prefecture["id"],
        country_id="japan",
        name=prefecture["name"],
        name_local=prefecture["name_local"],
        region_code=prefecture["code"],
        macro_region=prefecture["macro_region"],
        grid_col=col,
        grid_row=row,
    )


@router.get("", response_model=RegionListResponse)
async def list_regions(
    q: str | None = Query(None, max_length=50, description="영문명 / 일본어명 / ID 검색"),
):
    """도도부현 목록 (q 가 있으면 검색 결과)"""
    prefectures = search_prefectures(q) if q and q.strip() else get_all_prefectures()
    regions = [_to_response(p) for p in prefectures]
    return RegionListResponse(regions=regions, total=len(regions))


@router.get("/{region_id}", response_model=RegionResponse)
async def get_region(region_id: str):
    prefecture = get_prefecture(region_id)
    if prefecture is None:
        raise NotFoundError("Region not found")
    return _to_response(prefecture)
