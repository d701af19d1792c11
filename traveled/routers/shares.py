"""
공유 지도 API
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import AuthUser, get_current_user
from ..database import get_db
from ..middleware.rate_limiter import share_creation_limit, share_view_limit
from ..schemas.common import ErrorResponse, SuccessResponse
from ..schemas.share_schemas import (
    PublicSharedMapResponse,
    PublicShareResponse,
    ShareCreateRequest,
    ShareCreateResponse,
    ShareDetailResponse,
    SharedMapResponse,
    ShareStatusResponse,
    ShareUpdateRequest,
)
from ..services.share_service import ShareService
from ..services.storage_service import BlobStore, get_blob_store

router = APIRouter(prefix="/shares", tags=["shares"])


def get_share_service(
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
) -> ShareService:
    return ShareService(db, blob_store)


@router.post(
    "",
    response_model=ShareCreateResponse,
    dependencies=[Depends(share_creation_limit)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    },
)
async def create_share(
    share_create: ShareCreateRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    """
    공유 지도 생성

    imageData 가 없으면 사용자의 방문 기록으로 지도를 서버에서 렌더링합니다.
    """
    result = await service.create_share(current_user.id, share_create)
    return ShareCreateResponse(
        share_code=result["share_code"],
        share_url=result["share_url"],
        image_url=result["image_url"],
        share=SharedMapResponse.model_validate(result["share"]),
    )


@router.get("", response_model=ShareStatusResponse)
async def get_my_share(
    current_user: AuthUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    """현재 사용자의 활성 공유와 라이프사이클 상태"""
    share, state = service.get_share_state(current_user.id)
    return ShareStatusResponse(
        share=SharedMapResponse.model_validate(share) if share else None,
        state=state.value,
    )


@router.delete("", response_model=SuccessResponse)
async def delete_my_share(
    current_user: AuthUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    await service.delete_active_share(current_user.id)
    return SuccessResponse()


@router.get(
    "/{share_code}",
    response_model=PublicShareResponse,
    dependencies=[Depends(share_view_limit)],
    responses={404: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
async def view_share(
    share_code: str,
    service: ShareService = Depends(get_share_service),
):
    """공개 공유 지도 조회 (인증 불필요, 조회수 증가)"""
    share = service.view_share(share_code)
    return PublicShareResponse(share=PublicSharedMapResponse.model_validate(share))


@router.patch("/{share_code}", response_model=ShareDetailResponse)
async def update_share(
    share_code: str,
    share_update: ShareUpdateRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    share = service.update_share(current_user.id, share_code, share_update)
    return ShareDetailResponse(share=SharedMapResponse.model_validate(share))


@router.delete("/{share_code}", response_model=SuccessResponse)
async def delete_share(
    share_code: str,
    current_user: AuthUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    await service.delete_share(current_user.id, share_code)
    return SuccessResponse()
