"""
공유 지도 라이프사이클 서비스

상태: no-share -> generating -> active -> deleting -> no-share
사용자당 활성 공유는 최대 하나이며, 진행 중인 생성/삭제가 있으면 409 로 거절합니다.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..exceptions import (
    ConflictError,
    NotFoundError,
    PayloadTooLargeError,
    TraveledError,
    ValidationFailedError,
)
from ..models import SharedMap, ShareState, Visit
from ..schemas.share_schemas import ShareCreateRequest, ShareUpdateRequest
from ..utils.image_utils import PNG_DATA_URL_PREFIX, compress_image, decode_data_url, format_file_size
from ..utils.share_utils import (
    generate_share_code,
    generate_storage_path,
    get_share_url,
    validate_share_code,
)
from .image_export import FILE_SIZE_MAX_THRESHOLD, MapExporter
from .map_renderer import build_map_scene
from .storage_service import BlobStore

logger = logging.getLogger(__name__)

COMPRESSION_THRESHOLD = 2 * 1024 * 1024  # 2MB
MAX_SHARE_CODE_ATTEMPTS = 10
DEFAULT_SHARE_TITLE = "My Travel Map"

# user_id -> 진행 중인 전이 상태 (프로세스 로컬)
_in_flight: dict[str, ShareState] = {}


@contextmanager
def share_transition(user_id: str, state: ShareState):
    """사용자별 생성/삭제 전이 구간 - 중첩 요청은 409"""
    if user_id in _in_flight:
        raise ConflictError("A share operation is already in progress. Please wait.")
    _in_flight[user_id] = state
    try:
        yield
    finally:
        _in_flight.pop(user_id, None)


def reset_in_flight():
    _in_flight.clear()


class ShareService:
    """공유 지도 관리 서비스"""

    def __init__(self, db: Session, blob_store: BlobStore):
        self.db = db
        self.blob_store = blob_store

    def get_active_share(self, user_id: str) -> SharedMap | None:
        return (
            self.db.query(SharedMap)
            .filter(SharedMap.user_id == user_id, SharedMap.is_active.is_(True))
            .first()
        )

    def get_share_state(self, user_id: str) -> tuple[SharedMap | None, ShareState]:
        share = self.get_active_share(user_id)
        if user_id in _in_flight:
            return share, _in_flight[user_id]
        return share, ShareState.ACTIVE if share else ShareState.NO_SHARE

    def _get_owned_share(self, user_id: str, share_code: str) -> SharedMap:
        if not validate_share_code(share_code):
            raise ValidationFailedError("Invalid share code format")
        share = (
            self.db.query(SharedMap)
            .filter(SharedMap.share_code == share_code, SharedMap.user_id == user_id)
            .first()
        )
        if share is None:
            raise NotFoundError("Share not found or access denied")
        return share

    # ===== 생성 =====

    def _decode_image(self, image_data: str) -> bytes:
        if not image_data.startswith(PNG_DATA_URL_PREFIX):
            raise ValidationFailedError("Invalid image format. PNG required.")
        try:
            _, data = decode_data_url(image_data)
        except ValueError as e:
            raise ValidationFailedError("Valid image data is required") from e
        if not data:
            raise ValidationFailedError("Valid image data is required")
        return data

    def _render_user_map(self, user_id: str, theme: str | None, title: str) -> bytes:
        visits = self.db.query(Visit).filter(Visit.user_id == user_id).all()
        try:
            scene = build_map_scene(visits, theme or settings.export_default_theme, title)
        except ValueError as e:
            raise ValidationFailedError(str(e)) from e
        result = MapExporter().export_or_raise(scene, scale=settings.export_scale)
        logger.info(f"서버 렌더링 지도 생성 ({user_id}): {result.renderer}, {format_file_size(result.file_size)}")
        return result.png

    def _prepare_image(self, data: bytes) -> bytes:
        if len(data) > FILE_SIZE_MAX_THRESHOLD:
            raise PayloadTooLargeError(
                f"Image is too large ({format_file_size(len(data))}). Maximum size is 50 MB."
            )
        if len(data) > COMPRESSION_THRESHOLD:
            try:
                compressed = compress_image(data)
            except Exception as e:
                raise ValidationFailedError("Invalid image data") from e
            logger.info(
                f"공유 이미지 압축: {format_file_size(len(data))} -> {format_file_size(len(compressed))}"
            )
            return compressed
        return data

    def _generate_unique_code(self) -> str:
        for _ in range(MAX_SHARE_CODE_ATTEMPTS):
            code = generate_share_code()
            exists = self.db.query(SharedMap.id).filter(SharedMap.share_code == code).first()
            if exists is None:
                return code
        raise TraveledError("Failed to generate share code")

    async def _remove_blob(self, path: str, context: str) -> None:
        """Blob 삭제 - 실패는 로그만 남김"""
        try:
            await self.blob_store.remove([path])
        except Exception as e:
            logger.warning(f"이미지 삭제 실패 ({context}, {path}): {e}")

    async def create_share(self, user_id: str, request: ShareCreateRequest) -> dict:
        """
        공유 지도 생성

        1. 진행 중인 전이 / 기존 활성 공유 확인 (409)
        2. 클라이언트 PNG 사용 또는 서버 렌더링
        3. 크기 제한 확인 후 필요 시 압축
        4. 업로드 후 DB 기록 - 기록 실패 시 업로드한 이미지 정리
        """
        image = self._decode_image(request.image_data) if request.image_data is not None else None
        title = request.title or DEFAULT_SHARE_TITLE

        with share_transition(user_id, ShareState.GENERATING):
            if self.get_active_share(user_id) is not None:
                raise ConflictError(
                    "You already have an active shared map. Please remove it first to create a new one."
                )

            if image is None:
                image = self._render_user_map(user_id, request.theme, title)
            image = self._prepare_image(image)

            share_code = self._generate_unique_code()
            storage_path = generate_storage_path(user_id, share_code)

            await self.blob_store.upload(
                storage_path,
                image,
                content_type="image/png",
                cache_control="3600",
                upsert=False,
            )
            image_url = self.blob_store.get_public_url(storage_path)

            share = SharedMap(
                user_id=user_id,
                share_code=share_code,
                image_url=image_url,
                title=title,
                description=request.description or None,
            )
            try:
                self.db.add(share)
                self.db.commit()
                self.db.refresh(share)
            except IntegrityError as e:
                self.db.rollback()
                logger.error(f"공유 기록 생성 실패 - 제약 위반 ({user_id}): {e}")
                await self._remove_blob(storage_path, "insert rollback")
                raise ConflictError("Share code collision detected. Please try again.") from e
            except Exception as e:
                self.db.rollback()
                logger.error(f"공유 기록 생성 실패 ({user_id}): {e}")
                await self._remove_blob(storage_path, "insert rollback")
                raise TraveledError("Failed to create share record") from e

        logger.info(f"공유 지도 생성: {user_id} -> {share_code}")
        return {
            "success": True,
            "share_code": share_code,
            "share_url": get_share_url(share_code),
            "image_url": image_url,
            "share": share,
        }

    # ===== 삭제 =====

    async def _delete(self, user_id: str, share: SharedMap) -> None:
        with share_transition(user_id, ShareState.DELETING):
            storage_path = generate_storage_path(user_id, share.share_code)
            await self._remove_blob(storage_path, "share delete")

            try:
                self.db.delete(share)
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                logger.error(f"공유 기록 삭제 실패 ({share.share_code}): {e}")
                raise TraveledError("Failed to delete share") from e

        logger.info(f"공유 지도 삭제: {user_id} -> {share.share_code}")

    async def delete_active_share(self, user_id: str) -> None:
        share = self.get_active_share(user_id)
        if share is None:
            raise NotFoundError("No active share found")
        await self._delete(user_id, share)

    async def delete_share(self, user_id: str, share_code: str) -> None:
        share = self._get_owned_share(user_id, share_code)
        await self._delete(user_id, share)

    # ===== 수정 =====

    def update_share(self, user_id: str, share_code: str, share_update: ShareUpdateRequest) -> SharedMap:
        share = self._get_owned_share(user_id, share_code)
        update_data = share_update.model_dump(exclude_unset=True)

        if update_data.get("title") is None:
            update_data.pop("title", None)
        if update_data.get("is_active") is None:
            update_data.pop("is_active", None)

        if update_data.get("is_active") and not share.is_active:
            active = self.get_active_share(user_id)
            if active is not None and active.id != share.id:
                raise ConflictError("You already have an active shared map.")

        for field, value in update_data.items():
            setattr(share, field, value)

        try:
            self.db.commit()
            self.db.refresh(share)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("You already have an active shared map.") from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"공유 수정 실패 ({share_code}): {e}")
            raise TraveledError("Failed to update share") from e
        return share

    # ===== 공개 조회 =====

    def get_public_share(self, share_code: str) -> SharedMap:
        if not validate_share_code(share_code):
            raise ValidationFailedError("Invalid share code format")
        share = (
            self.db.query(SharedMap)
            .filter(SharedMap.share_code == share_code, SharedMap.is_active.is_(True))
            .first()
        )
        if share is None:
            raise NotFoundError("Share not found")
        return share

    def increment_view_count(self, share_code: str) -> None:
        """조회수 원자적 증가 - 실패해도 요청은 성공"""
        try:
            self.db.execute(
                update(SharedMap)
                .where(SharedMap.share_code == share_code)
                .values(view_count=SharedMap.view_count + 1)
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning(f"조회수 증가 실패 ({share_code}): {e}")

    def view_share(self, share_code: str) -> SharedMap:
        share = self.get_public_share(share_code)
        self.increment_view_count(share_code)
        self.db.refresh(share)
        return share
