"""
지역(도도부현) 스키마 정의
"""

from pydantic import BaseModel, ConfigDict, Field


class RegionResponse(BaseModel):
    """도도부현 정보 응답 스키마"""

    id: str
    country_id: str
    name: str
    name_local: str
    region_code: str
    macro_region: str
    grid_col: int | None = Field(None, description="타일 지도 열 위치")
    grid_row: int | None = Field(None, description="타일 지도 행 위치")

    model_config = ConfigDict(from_attributes=True)


class RegionListResponse(BaseModel):
    regions: list[RegionResponse]
    total: int
