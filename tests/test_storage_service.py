"""
Blob 저장소 백엔드 테스트
"""

import asyncio

import pytest

from traveled.config import settings
from traveled.exceptions import StorageError
from traveled.services import storage_service
from traveled.services.storage_service import LocalBlobStore, SupabaseBlobStore, create_blob_store


class FakeBucket:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads = []
        self.removed = []

    def upload(self, path, file, file_options=None):
        if self.fail:
            raise RuntimeError("409 Duplicate: The resource already exists")
        self.uploads.append((path, file, file_options))
        return {"Key": f"shared-maps/{path}"}

    def remove(self, paths):
        if self.fail:
            raise RuntimeError("503 Service Unavailable")
        self.removed.append(paths)
        return []

    def get_public_url(self, path):
        return f"https://project.supabase.co/storage/v1/object/public/shared-maps/{path}?"


class FakeStorage:
    def __init__(self, bucket: FakeBucket):
        self.bucket = bucket
        self.requested = []

    def from_(self, name):
        self.requested.append(name)
        return self.bucket


class FakeSupabaseClient:
    def __init__(self, fail: bool = False):
        self.storage = FakeStorage(FakeBucket(fail))


class TestSupabaseBlobStore:
    """호스팅 스토리지 버킷 어댑터 테스트"""

    def test_upload_options(self):
        client = FakeSupabaseClient()
        store = SupabaseBlobStore(client, bucket="shared-maps")

        asyncio.run(store.upload("user-1/ABCDEFGH.png", b"png-bytes", cache_control="3600"))

        assert client.storage.requested == ["shared-maps"]
        assert client.storage.bucket.uploads == [(
            "user-1/ABCDEFGH.png",
            b"png-bytes",
            {"content-type": "image/png", "cache-control": "3600", "upsert": "false"},
        )]

    def test_upsert_flag(self):
        client = FakeSupabaseClient()
        store = SupabaseBlobStore(client, bucket="shared-maps")

        asyncio.run(store.upload("user-1/ABCDEFGH.png", b"png", upsert=True))

        assert client.storage.bucket.uploads[0][2]["upsert"] == "true"

    def test_remove(self):
        client = FakeSupabaseClient()
        store = SupabaseBlobStore(client, bucket="shared-maps")

        asyncio.run(store.remove(["user-1/ABCDEFGH.png"]))

        assert client.storage.bucket.removed == [["user-1/ABCDEFGH.png"]]

    def test_public_url(self):
        store = SupabaseBlobStore(FakeSupabaseClient(), bucket="shared-maps")

        assert store.get_public_url("user-1/ABCDEFGH.png") == (
            "https://project.supabase.co/storage/v1/object/public/shared-maps/user-1/ABCDEFGH.png"
        )

    def test_upload_failure_is_storage_error(self):
        store = SupabaseBlobStore(FakeSupabaseClient(fail=True), bucket="shared-maps")

        with pytest.raises(StorageError) as exc_info:
            asyncio.run(store.upload("user-1/ABCDEFGH.png", b"png"))

        assert exc_info.value.message == "Failed to upload image"

    def test_remove_failure_is_storage_error(self):
        store = SupabaseBlobStore(FakeSupabaseClient(fail=True), bucket="shared-maps")

        with pytest.raises(StorageError) as exc_info:
            asyncio.run(store.remove(["user-1/ABCDEFGH.png"]))

        assert exc_info.value.message == "Failed to remove image"


class TestLocalBlobStore:
    """로컬 디렉토리 저장소 테스트"""

    @pytest.fixture
    def store(self, tmp_path) -> LocalBlobStore:
        return LocalBlobStore(
            root=str(tmp_path),
            bucket="shared-maps",
            url_prefix="/media/",
            public_base_url="https://traveled.test/",
        )

    def test_upload_writes_file(self, store: LocalBlobStore, tmp_path):
        asyncio.run(store.upload("user-1/ABCDEFGH.png", b"png"))

        assert (tmp_path / "shared-maps" / "user-1" / "ABCDEFGH.png").read_bytes() == b"png"

    def test_upload_without_upsert_conflicts(self, store: LocalBlobStore, tmp_path):
        asyncio.run(store.upload("user-1/ABCDEFGH.png", b"first"))

        with pytest.raises(StorageError):
            asyncio.run(store.upload("user-1/ABCDEFGH.png", b"second"))

        assert (tmp_path / "shared-maps" / "user-1" / "ABCDEFGH.png").read_bytes() == b"first"

    def test_upsert_overwrites(self, store: LocalBlobStore, tmp_path):
        asyncio.run(store.upload("user-1/ABCDEFGH.png", b"first"))
        asyncio.run(store.upload("user-1/ABCDEFGH.png", b"second", upsert=True))

        assert (tmp_path / "shared-maps" / "user-1" / "ABCDEFGH.png").read_bytes() == b"second"

    @pytest.mark.parametrize("path", ["../escape.png", "user-1/../../escape.png", "/etc/passwd"])
    def test_rejects_paths_outside_bucket(self, store: LocalBlobStore, tmp_path, path):
        with pytest.raises(StorageError):
            asyncio.run(store.upload(path, b"png"))

        assert not (tmp_path / "escape.png").exists()

    def test_remove_is_idempotent(self, store: LocalBlobStore, tmp_path):
        asyncio.run(store.upload("user-1/ABCDEFGH.png", b"png"))

        asyncio.run(store.remove(["user-1/ABCDEFGH.png", "user-1/ZZZZZZZZ.png"]))

        assert not (tmp_path / "shared-maps" / "user-1" / "ABCDEFGH.png").exists()

    def test_public_url(self, store: LocalBlobStore):
        assert store.get_public_url("user-1/ABCDEFGH.png") == (
            "https://traveled.test/media/shared-maps/user-1/ABCDEFGH.png"
        )


class TestCreateBlobStore:
    def test_local_backend(self, monkeypatch):
        monkeypatch.setattr(settings, "storage_backend", "local")

        assert isinstance(create_blob_store(), LocalBlobStore)

    def test_supabase_backend_requires_credentials(self, monkeypatch):
        monkeypatch.setattr(settings, "storage_backend", "supabase")
        monkeypatch.setattr(settings, "supabase_url", "")

        with pytest.raises(StorageError):
            create_blob_store()

    def test_supabase_backend(self, monkeypatch):
        created = {}

        def fake_create_client(url, key, options=None):
            created.update(url=url, key=key, timeout=options.storage_client_timeout)
            return FakeSupabaseClient()

        monkeypatch.setattr(settings, "storage_backend", "supabase")
        monkeypatch.setattr(settings, "supabase_url", "https://project.supabase.co")
        monkeypatch.setattr(settings, "supabase_service_key", "service-key")
        monkeypatch.setattr(storage_service, "create_client", fake_create_client)

        store = create_blob_store()

        assert isinstance(store, SupabaseBlobStore)
        assert store.bucket == "shared-maps"
        assert created == {
            "url": "https://project.supabase.co",
            "key": "service-key",
            "timeout": settings.storage_timeout,
        }
