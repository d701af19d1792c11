"""
Pytest configuration and fixtures for Traveled API tests.
"""

import io
import os
import sys
import tempfile
from typing import Generator

import pytest

# 설정 로드 전에 테스트 환경 변수 지정
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-for-testing-only"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["RATE_LIMIT_BACKEND"] = "memory"
os.environ["API_RATE_LIMIT_ENABLED"] = "false"
os.environ["PUBLIC_BASE_URL"] = "https://traveled.test"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="traveled-logs-")
os.environ["MEDIA_DIR"] = tempfile.mkdtemp(prefix="traveled-media-")

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from traveled.auth.utils import create_access_token
from traveled.database import get_db
from traveled.exceptions import StorageError
from traveled.init_data import seed_reference_data
from traveled.middleware.rate_limiter import get_rate_limit_backend
from traveled.models import Base
from traveled.services.share_service import reset_in_flight
from traveled.services.storage_service import BlobStore, get_blob_store
from traveled.utils.image_utils import encode_data_url

# 테스트용 데이터베이스 URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite:///:memory:"

# 테스트용 엔진 생성
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(test_engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """SQLite 외래 키 제약 활성화"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# 테스트용 세션 팩토리
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"


class FakeBlobStore(BlobStore):
    """메모리 기반 Blob 저장소 (실패 주입 가능)"""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.uploads: list[dict] = []
        self.fail_upload = False
        self.fail_remove = False

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = "image/png",
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> None:
        if self.fail_upload:
            raise StorageError("Failed to upload image")
        if path in self.objects and not upsert:
            raise StorageError("The resource already exists")
        self.objects[path] = data
        self.uploads.append({
            "path": path,
            "content_type": content_type,
            "cache_control": cache_control,
            "upsert": upsert,
        })

    async def remove(self, paths: list[str]) -> None:
        if self.fail_remove:
            raise StorageError("Failed to remove image")
        for path in paths:
            self.objects.pop(path, None)

    def get_public_url(self, path: str) -> str:
        return f"https://storage.test/shared-maps/{path}"


def make_png(width: int = 8, height: int = 6, color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_png_data_url(width: int = 8, height: int = 6) -> str:
    return encode_data_url(make_png(width, height))


def auth_headers_for(user_id: str, email: str | None = None) -> dict:
    token = create_access_token(user_id, email=email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def reset_process_state():
    """Rate limit 카운터와 공유 전이 상태 초기화"""
    get_rate_limit_backend().reset()
    reset_in_flight()
    yield
    get_rate_limit_backend().reset()
    reset_in_flight()


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    각 테스트 함수마다 새로운 데이터베이스 세션을 생성합니다.
    기준 데이터(국가, 도도부현)를 적재하고, 테스트가 끝나면 초기화합니다.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    seed_reference_data(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture(scope="function")
def client(db_session: Session, blob_store: FakeBlobStore) -> Generator[TestClient, None, None]:
    """
    테스트용 FastAPI 클라이언트를 생성합니다.
    데이터베이스와 Blob 저장소 의존성을 테스트용으로 오버라이드합니다.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    with TestClient(app) as test_client:
        yield test_client

    # 의존성 오버라이드 제거
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    return auth_headers_for(TEST_USER_ID, "traveler@example.com")


@pytest.fixture
def other_auth_headers() -> dict:
    return auth_headers_for(OTHER_USER_ID, "other@example.com")


@pytest.fixture
def png_data_url() -> str:
    return make_png_data_url()
