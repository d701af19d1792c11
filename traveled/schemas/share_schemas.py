"""
공유 지도 스키마 정의
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ShareCreateRequest(BaseModel):
    """
    공유 생성 요청

    image_data 가 없으면 서버에서 사용자의 지도를 직접 렌더링합니다.
    """

    image_data: str | None = Field(
        None,
        validation_alias=AliasChoices("imageData", "image_data"),
        description="data:image/png;base64,... 형식의 PNG",
    )
    title: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=500)
    theme: str | None = Field(None, description="서버 렌더링 시 사용할 테마 (classic | modern)")


class ShareUpdateRequest(BaseModel):
    title: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class SharedMapResponse(BaseModel):
    id: str
    user_id: str
    share_code: str
    image_url: str
    title: str
    description: str | None = None
    is_active: bool
    view_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PublicSharedMapResponse(BaseModel):
    """공개 조회용 (user_id 제외)"""

    id: str
    share_code: str
    image_url: str
    title: str
    description: str | None = None
    view_count: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ShareCreateResponse(BaseModel):
    success: bool = True
    share_code: str = Field(..., serialization_alias="shareCode")
    share_url: str = Field(..., serialization_alias="shareUrl")
    image_url: str = Field(..., serialization_alias="imageUrl")
    share: SharedMapResponse


class ShareStatusResponse(BaseModel):
    share: SharedMapResponse | None = None
    state: str


class ShareDetailResponse(BaseModel):
    success: bool = True
    share: SharedMapResponse


class PublicShareResponse(BaseModel):
    success: bool = True
    share: PublicSharedMapResponse
