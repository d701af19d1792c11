"""
공유 지도 이미지 Blob 스토리지

- SupabaseBlobStore: 호스팅 스토리지 버킷 (supabase-py)
- LocalBlobStore: 로컬 디렉토리 (개발 환경)
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from supabase import Client, ClientOptions, create_client

from ..config import settings
from ..exceptions import StorageError

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """경로 기반 Blob 저장소 인터페이스"""

    @abstractmethod
    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = "image/png",
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> None:
        pass

    @abstractmethod
    async def remove(self, paths: list[str]) -> None:
        pass

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        pass


class SupabaseBlobStore(BlobStore):
    """호스팅 스토리지 버킷 (supabase-py 클라이언트)"""

    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = "image/png",
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> None:
        file_options = {
            "content-type": content_type,
            "cache-control": cache_control,
            "upsert": "true" if upsert else "false",
        }
        try:
            # supabase-py 동기 클라이언트
            await asyncio.to_thread(self._bucket().upload, path, data, file_options)
        except Exception as e:
            logger.error(f"스토리지 업로드 실패 ({path}): {e}")
            raise StorageError("Failed to upload image") from e

    async def remove(self, paths: list[str]) -> None:
        try:
            await asyncio.to_thread(self._bucket().remove, paths)
        except Exception as e:
            logger.error(f"스토리지 삭제 실패 ({paths}): {e}")
            raise StorageError("Failed to remove image") from e

    def get_public_url(self, path: str) -> str:
        return self._bucket().get_public_url(path).rstrip("?")


class LocalBlobStore(BlobStore):
    """로컬 디렉토리 저장소 - main.py 가 media_url_prefix 로 정적 서빙"""

    def __init__(self, root: str, bucket: str, url_prefix: str, public_base_url: str = ""):
        self.root = Path(root) / bucket
        self.bucket = bucket
        self.url_prefix = url_prefix.rstrip("/")
        self.public_base_url = public_base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError(f"Invalid storage path: {path}")
        return target

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = "image/png",
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> None:
        target = self._resolve(path)
        if target.exists() and not upsert:
            raise StorageError("The resource already exists")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"로컬 저장 실패 ({path}): {e}")
            raise StorageError("Failed to upload image") from e

    async def remove(self, paths: list[str]) -> None:
        for path in paths:
            try:
                self._resolve(path).unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"로컬 삭제 실패 ({path}): {e}")
                raise StorageError("Failed to remove image") from e

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}{self.url_prefix}/{self.bucket}/{path}"


_blob_store: BlobStore | None = None


def create_blob_store() -> BlobStore:
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise StorageError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required for supabase storage")
        client = create_client(
            settings.supabase_url,
            settings.supabase_service_key,
            options=ClientOptions(storage_client_timeout=settings.storage_timeout),
        )
        return SupabaseBlobStore(client, bucket=settings.storage_bucket)
    return LocalBlobStore(
        root=settings.media_dir,
        bucket=settings.storage_bucket,
        url_prefix=settings.media_url_prefix,
        public_base_url=settings.public_base_url,
    )


def get_blob_store() -> BlobStore:
    """FastAPI 의존성 - 프로세스 단위 Blob 저장소"""
    global _blob_store
    if _blob_store is None:
        _blob_store = create_blob_store()
        logger.info(f"Blob 저장소 초기화: {type(_blob_store).__name__}")
    return _blob_store
