"""
방문 기록 / 별점 / 통계 / 내보내기 API 테스트
"""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from traveled.models import PrefectureRating, Visit
from conftest import TEST_USER_ID


def create_visit(client: TestClient, headers: dict, **overrides) -> dict:
    payload = {"region_id": "tokyo", "rating": 3, "visit_year": 2020, "notes": "Shibuya"}
    payload.update(overrides)
    response = client.post("/api/visits", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestVisitsAPI:
    """방문 기록 API 테스트"""

    def test_requires_authentication(self, client: TestClient):
        response = client.get("/api/visits")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_invalid_token(self, client: TestClient):
        response = client.get("/api/visits", headers={"Authorization": "Bearer invalid"})
        assert response.status_code == 401

    def test_create_and_list(self, client: TestClient, auth_headers: dict):
        created = create_visit(client, auth_headers)

        assert created["user_id"] == TEST_USER_ID
        assert created["country_id"] == "japan"
        assert created["notes"] == "Shibuya"

        response = client.get("/api/visits", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["visits"][0]["id"] == created["id"]

    def test_rating_out_of_range(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/visits",
            json={"region_id": "tokyo", "rating": 6, "visit_year": 2020},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "rating"

    def test_year_out_of_range(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/visits",
            json={"region_id": "tokyo", "rating": 3, "visit_year": 1899},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_notes_too_long(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/visits",
            json={"region_id": "tokyo", "rating": 3, "visit_year": 2020, "notes": "x" * 10_001},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_unknown_region(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/visits",
            json={"region_id": "atlantis", "rating": 3, "visit_year": 2020},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Unknown region"

    def test_visits_are_owner_scoped(
        self, client: TestClient, auth_headers: dict, other_auth_headers: dict
    ):
        created = create_visit(client, auth_headers)

        assert client.get("/api/visits", headers=other_auth_headers).json()["total"] == 0
        assert client.get(f"/api/visits/{created['id']}", headers=other_auth_headers).status_code == 404
        assert client.delete(f"/api/visits/{created['id']}", headers=other_auth_headers).status_code == 404

    def test_update_visit(self, client: TestClient, auth_headers: dict):
        created = create_visit(client, auth_headers)

        response = client.patch(
            f"/api/visits/{created['id']}",
            json={"rating": 5, "notes": "Lived in Setagaya"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["rating"] == 5
        assert data["visit_year"] == 2020
        assert data["notes"] == "Lived in Setagaya"

    def test_delete_visit(self, client: TestClient, auth_headers: dict, db_session: Session):
        created = create_visit(client, auth_headers)

        response = client.delete(f"/api/visits/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert db_session.query(Visit).count() == 0

    def test_by_region_defaults_to_most_recent(self, client: TestClient, auth_headers: dict):
        create_visit(client, auth_headers, visit_year=2018, rating=2)
        create_visit(client, auth_headers, visit_year=2023, rating=4)

        latest = client.get("/api/visits/by-region/tokyo", headers=auth_headers)
        specific = client.get("/api/visits/by-region/tokyo?year=2018", headers=auth_headers)
        missing = client.get("/api/visits/by-region/tokyo?year=2000", headers=auth_headers)

        assert latest.json()["visit_year"] == 2023
        assert specific.json()["rating"] == 2
        assert missing.status_code == 404


class TestPrefectureRatingsAPI:
    """도도부현 별점 upsert 테스트"""

    def test_upsert_keeps_single_row(self, client: TestClient, auth_headers: dict, db_session: Session):
        first = client.put("/api/prefecture-ratings/kyoto", json={"star_rating": 3}, headers=auth_headers)
        second = client.put("/api/prefecture-ratings/kyoto", json={"star_rating": 5}, headers=auth_headers)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["star_rating"] == 5
        assert first.json()["id"] == second.json()["id"]
        assert db_session.query(PrefectureRating).count() == 1

    def test_list_get_delete(self, client: TestClient, auth_headers: dict):
        client.put("/api/prefecture-ratings/nara", json={"star_rating": 4}, headers=auth_headers)

        listed = client.get("/api/prefecture-ratings", headers=auth_headers)
        assert [r["region_id"] for r in listed.json()] == ["nara"]

        assert client.get("/api/prefecture-ratings/nara", headers=auth_headers).json()["star_rating"] == 4
        assert client.delete("/api/prefecture-ratings/nara", headers=auth_headers).status_code == 200
        assert client.get("/api/prefecture-ratings/nara", headers=auth_headers).status_code == 404

    def test_invalid_star_rating(self, client: TestClient, auth_headers: dict):
        response = client.put("/api/prefecture-ratings/nara", json={"star_rating": 9}, headers=auth_headers)
        assert response.status_code == 400

    def test_unknown_region(self, client: TestClient, auth_headers: dict):
        response = client.put("/api/prefecture-ratings/atlantis", json={"star_rating": 3}, headers=auth_headers)
        assert response.status_code == 404


class TestStatsAPI:
    def test_dashboard(self, client: TestClient, auth_headers: dict):
        create_visit(client, auth_headers, region_id="tokyo", rating=3, visit_year=2019)
        create_visit(client, auth_headers, region_id="tokyo", rating=5, visit_year=2021)
        create_visit(client, auth_headers, region_id="osaka", rating=2, visit_year=2021)

        response = client.get("/api/stats", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["visited_regions"] == 2
        assert data["stats"]["rating_breakdown"]["5"] == 1
        assert data["stats"]["rating_breakdown"]["3"] == 0
        assert data["stats"]["last_visit"] == 2021
        assert data["score"]["total_visits"] == 3
        assert data["cumulative"] == [{"year": 2019, "total": 1}, {"year": 2021, "total": 2}]

    def test_prefecture_summary(self, client: TestClient, auth_headers: dict):
        create_visit(client, auth_headers, region_id="osaka", rating=2, visit_year=2021)
        client.put("/api/prefecture-ratings/osaka", json={"star_rating": 4}, headers=auth_headers)

        response = client.get("/api/stats/prefectures", headers=auth_headers)

        rows = response.json()["prefectures"]
        assert len(rows) == 1
        assert rows[0]["region_id"] == "osaka"
        assert rows[0]["star_rating"] == 4


class TestExportAPI:
    def test_png_export(self, client: TestClient, auth_headers: dict):
        create_visit(client, auth_headers)

        response = client.get("/api/export/map.png?theme=modern&scale=1", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-export-renderer"] == "clone"
        assert response.content.startswith(b"\x89PNG")

    def test_svg_export(self, client: TestClient, auth_headers: dict):
        response = client.get("/api/export/map.svg", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert b"<svg" in response.content

    def test_unknown_theme(self, client: TestClient, auth_headers: dict):
        response = client.get("/api/export/map.png?theme=neon", headers=auth_headers)
        assert response.status_code == 400
