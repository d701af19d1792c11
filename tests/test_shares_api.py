"""
공유 지도 라이프사이클 API 테스트
"""

import io

from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.orm import Session

from traveled.models import SharedMap, ShareState
from traveled.services.share_service import ShareService, share_transition
from traveled.utils.image_utils import encode_data_url
from conftest import TEST_USER_ID, FakeBlobStore, make_png


def create_share(client: TestClient, headers: dict, data_url: str, **extra):
    return client.post("/api/shares", json={"imageData": data_url, **extra}, headers=headers)


class TestCreateShare:
    """공유 생성 테스트"""

    def test_create_share(
        self, client: TestClient, auth_headers: dict, png_data_url: str, blob_store: FakeBlobStore
    ):
        response = create_share(client, auth_headers, png_data_url, title="Japan 2024")

        assert response.status_code == 200, response.text
        data = response.json()
        code = data["shareCode"]
        assert data["success"] is True
        assert data["shareUrl"] == f"https://traveled.test/share/{code}"
        assert data["imageUrl"] == f"https://storage.test/shared-maps/{TEST_USER_ID}/{code}.png"
        assert data["share"]["title"] == "Japan 2024"
        assert data["share"]["is_active"] is True
        assert data["share"]["view_count"] == 0

        assert blob_store.uploads == [{
            "path": f"{TEST_USER_ID}/{code}.png",
            "content_type": "image/png",
            "cache_control": "3600",
            "upsert": False,
        }]

    def test_default_title(self, client: TestClient, auth_headers: dict, png_data_url: str):
        response = create_share(client, auth_headers, png_data_url)
        assert response.json()["share"]["title"] == "My Travel Map"

    def test_snake_case_image_field(self, client: TestClient, auth_headers: dict, png_data_url: str):
        response = client.post("/api/shares", json={"image_data": png_data_url}, headers=auth_headers)
        assert response.status_code == 200

    def test_requires_authentication(self, client: TestClient, png_data_url: str):
        response = client.post("/api/shares", json={"imageData": png_data_url})
        assert response.status_code == 401

    def test_rejects_non_png(self, client: TestClient, auth_headers: dict):
        jpeg_url = encode_data_url(b"\xff\xd8\xff", "image/jpeg")
        response = create_share(client, auth_headers, jpeg_url)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid image format. PNG required."

    def test_title_too_long(self, client: TestClient, auth_headers: dict, png_data_url: str):
        response = create_share(client, auth_headers, png_data_url, title="x" * 101)
        assert response.status_code == 400

    def test_description_too_long(self, client: TestClient, auth_headers: dict, png_data_url: str):
        response = create_share(client, auth_headers, png_data_url, description="x" * 501)
        assert response.status_code == 400

    def test_duplicate_active_share_conflicts(
        self,
        client: TestClient,
        auth_headers: dict,
        png_data_url: str,
        blob_store: FakeBlobStore,
        db_session: Session,
    ):
        """활성 공유가 있으면 409 - 새 행도 새 Blob 도 생기지 않음"""
        assert create_share(client, auth_headers, png_data_url).status_code == 200

        response = create_share(client, auth_headers, png_data_url)

        assert response.status_code == 409
        assert db_session.query(SharedMap).count() == 1
        assert len(blob_store.uploads) == 1
        assert len(blob_store.objects) == 1

    def test_server_side_render_without_image(
        self, client: TestClient, auth_headers: dict, blob_store: FakeBlobStore
    ):
        client.post(
            "/api/visits",
            json={"region_id": "kyoto", "rating": 4, "visit_year": 2022},
            headers=auth_headers,
        )

        response = client.post("/api/shares", json={"theme": "modern"}, headers=auth_headers)

        assert response.status_code == 200, response.text
        stored = next(iter(blob_store.objects.values()))
        assert stored.startswith(b"\x89PNG")

    def test_upload_failure(
        self, client: TestClient, auth_headers: dict, png_data_url: str,
        blob_store: FakeBlobStore, db_session: Session,
    ):
        blob_store.fail_upload = True

        response = create_share(client, auth_headers, png_data_url)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to upload image"}
        assert db_session.query(SharedMap).count() == 0

    def test_insert_failure_removes_uploaded_blob(
        self, client: TestClient, auth_headers: dict, png_data_url: str,
        blob_store: FakeBlobStore, db_session: Session, monkeypatch,
    ):
        """DB 유니크 인덱스 위반 시 업로드한 이미지를 정리하고 409"""
        assert create_share(client, auth_headers, png_data_url).status_code == 200
        first_paths = set(blob_store.objects)

        # 애플리케이션 검사를 우회해 동시 생성 경합을 재현
        monkeypatch.setattr(ShareService, "get_active_share", lambda self, user_id: None)
        response = create_share(client, auth_headers, png_data_url)

        assert response.status_code == 409
        assert set(blob_store.objects) == first_paths
        assert len(blob_store.uploads) == 2
        assert db_session.query(SharedMap).count() == 1

    def test_in_flight_operation_conflicts(self, client: TestClient, auth_headers: dict, png_data_url: str):
        with share_transition(TEST_USER_ID, ShareState.GENERATING):
            status = client.get("/api/shares", headers=auth_headers).json()
            response = create_share(client, auth_headers, png_data_url)

        assert status["state"] == "generating"
        assert response.status_code == 409

    def test_creation_rate_limit(self, client: TestClient, auth_headers: dict, png_data_url: str):
        """하루 10회 제한 - 11번째 요청은 429"""
        for _ in range(10):
            assert create_share(client, auth_headers, png_data_url).status_code == 200
            assert client.delete("/api/shares", headers=auth_headers).status_code == 200

        response = create_share(client, auth_headers, png_data_url)

        assert response.status_code == 429
        assert response.json()["error"] == "Too many shares created. Please try again later."
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert "X-RateLimit-Reset" in response.headers


class TestMyShare:
    def test_status_without_share(self, client: TestClient, auth_headers: dict):
        response = client.get("/api/shares", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"share": None, "state": "no-share"}

    def test_status_with_active_share(self, client: TestClient, auth_headers: dict, png_data_url: str):
        code = create_share(client, auth_headers, png_data_url).json()["shareCode"]

        data = client.get("/api/shares", headers=auth_headers).json()

        assert data["state"] == "active"
        assert data["share"]["share_code"] == code


class TestDeleteShare:
    """공유 삭제 테스트"""

    def test_delete_active_share(
        self, client: TestClient, auth_headers: dict, png_data_url: str,
        blob_store: FakeBlobStore, db_session: Session,
    ):
        create_share(client, auth_headers, png_data_url)

        response = client.delete("/api/shares", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert db_session.query(SharedMap).count() == 0
        assert blob_store.objects == {}

    def test_delete_succeeds_when_blob_removal_fails(
        self, client: TestClient, auth_headers: dict, png_data_url: str,
        blob_store: FakeBlobStore, db_session: Session,
    ):
        """Blob 삭제 실패는 행 삭제를 막지 않음"""
        create_share(client, auth_headers, png_data_url)
        blob_store.fail_remove = True

        response = client.delete("/api/shares", headers=auth_headers)

        assert response.status_code == 200
        assert db_session.query(SharedMap).count() == 0
        assert len(blob_store.objects) == 1

    def test_delete_without_share(self, client: TestClient, auth_headers: dict):
        response = client.delete("/api/shares", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "No active share found"}

    def test_delete_by_code_is_owner_scoped(
        self, client: TestClient, auth_headers: dict, other_auth_headers: dict, png_data_url: str,
    ):
        code = create_share(client, auth_headers, png_data_url).json()["shareCode"]

        assert client.delete(f"/api/shares/{code}", headers=other_auth_headers).status_code == 404
        assert client.delete(f"/api/shares/{code}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/shares/{code}").status_code == 404


class TestPublicShare:
    """공개 조회 테스트"""

    def test_view_increments_count(self, client: TestClient, auth_headers: dict, png_data_url: str):
        code = create_share(client, auth_headers, png_data_url).json()["shareCode"]

        first = client.get(f"/api/shares/{code}")
        second = client.get(f"/api/shares/{code}")

        assert first.status_code == 200
        assert first.json()["success"] is True
        assert first.json()["share"]["view_count"] == 1
        assert second.json()["share"]["view_count"] == 2
        assert "user_id" not in first.json()["share"]

    def test_invalid_code_format(self, client: TestClient):
        response = client.get("/api/shares/not-valid")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid share code format"}

    def test_unknown_code(self, client: TestClient):
        assert client.get("/api/shares/ABCDEFGH").status_code == 404

    def test_inactive_share_is_hidden(self, client: TestClient, auth_headers: dict, png_data_url: str):
        code = create_share(client, auth_headers, png_data_url).json()["shareCode"]
        client.patch(f"/api/shares/{code}", json={"is_active": False}, headers=auth_headers)

        assert client.get(f"/api/shares/{code}").status_code == 404


class TestUpdateShare:
    def test_owner_updates_title(self, client: TestClient, auth_headers: dict, png_data_url: str):
        code = create_share(client, auth_headers, png_data_url).json()["shareCode"]

        response = client.patch(
            f"/api/shares/{code}",
            json={"title": "Updated", "description": "Spring trip"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["share"]["title"] == "Updated"
        assert response.json()["share"]["description"] == "Spring trip"

    def test_other_user_cannot_update(
        self, client: TestClient, auth_headers: dict, other_auth_headers: dict, png_data_url: str,
    ):
        code = create_share(client, auth_headers, png_data_url).json()["shareCode"]

        response = client.patch(f"/api/shares/{code}", json={"title": "Hijack"}, headers=other_auth_headers)

        assert response.status_code == 404

    def test_reactivation_conflicts_with_newer_share(
        self, client: TestClient, auth_headers: dict, png_data_url: str,
    ):
        old_code = create_share(client, auth_headers, png_data_url).json()["shareCode"]
        client.patch(f"/api/shares/{old_code}", json={"is_active": False}, headers=auth_headers)
        assert create_share(client, auth_headers, png_data_url).status_code == 200

        response = client.patch(f"/api/shares/{old_code}", json={"is_active": True}, headers=auth_headers)

        assert response.status_code == 409


class TestLargeImages:
    def test_large_image_is_compressed(
        self, client: TestClient, auth_headers: dict, blob_store: FakeBlobStore, monkeypatch,
    ):
        monkeypatch.setattr("traveled.services.share_service.COMPRESSION_THRESHOLD", 1024)
        png = make_png(2400, 1800)
        assert len(png) > 1024

        response = create_share(client, auth_headers, encode_data_url(png))

        assert response.status_code == 200
        stored = next(iter(blob_store.objects.values()))
        with Image.open(io.BytesIO(stored)) as img:
            assert img.size == (1200, 900)

    def test_image_over_limit(self, client: TestClient, auth_headers: dict, monkeypatch):
        monkeypatch.setattr("traveled.services.share_service.FILE_SIZE_MAX_THRESHOLD", 10)

        response = create_share(client, auth_headers, encode_data_url(make_png()))

        assert response.status_code == 413


def test_other_user_share_state_unaffected(
    client: TestClient, auth_headers: dict, other_auth_headers: dict, png_data_url: str,
):
    create_share(client, auth_headers, png_data_url)

    assert client.get("/api/shares", headers=other_auth_headers).json()["state"] == "no-share"
    assert create_share(client, other_auth_headers, png_data_url).status_code == 200
