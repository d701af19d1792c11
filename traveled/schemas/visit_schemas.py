"""
방문 기록 / 도도부현 별점 스키마 정의
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traveled.utils.validation import MAX_NOTES_LENGTH, MIN_VISIT_YEAR, max_visit_year


def _check_visit_year(v: int | None) -> int | None:
    if v is not None and not MIN_VISIT_YEAR <= v <= max_visit_year():
        raise ValueError(f"Year must be between {MIN_VISIT_YEAR} and {max_visit_year()}")
    return v


class VisitCreate(BaseModel):
    """방문 기록 생성 요청"""

    region_id: str = Field(..., min_length=1, max_length=50)
    country_id: str = Field("japan", min_length=1, max_length=50)
    rating: int = Field(..., ge=0, le=5, description="방문 유형 (0: Never been ~ 5: Lived there)")
    visit_year: int = Field(default_factory=lambda: datetime.now().year)
    notes: str | None = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("visit_year")
    @classmethod
    def validate_visit_year(cls, v):
        return _check_visit_year(v)


class VisitUpdate(BaseModel):
    """방문 기록 수정 요청 (부분 수정)"""

    rating: int | None = Field(None, ge=0, le=5)
    visit_year: int | None = None
    notes: str | None = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("visit_year")
    @classmethod
    def validate_visit_year(cls, v):
        return _check_visit_year(v)


class VisitResponse(BaseModel):
    id: str
    user_id: str
    region_id: str
    country_id: str
    rating: int
    visit_year: int
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class VisitListResponse(BaseModel):
    visits: list[VisitResponse]
    total: int


class PrefectureRatingUpsert(BaseModel):
    country_id: str = Field("japan", min_length=1, max_length=50)
    star_rating: int = Field(..., ge=0, le=5, description="전체 인상 별점 (0~5)")


class PrefectureRatingResponse(BaseModel):
    id: str
    user_id: str
    region_id: str
    country_id: str
    star_rating: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
