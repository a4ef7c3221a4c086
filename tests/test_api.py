"""
Integration tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

import api
import config


@pytest.fixture
def client():
    api.STORE.clear()
    with TestClient(api.app) as test_client:
        yield test_client
    api.STORE.clear()


def _upload(client, text, filename="resume.txt", content_type="text/plain"):
    return client.post(
        "/api/resumes/upload",
        files={"resume": (filename, text.encode("utf-8"), content_type)},
    )


class TestUpload:
    def test_upload_text_resume(self, client, scenario_resume):
        response = _upload(client, scenario_resume)

        assert response.status_code == 201
        resume = response.json()["resume"]
        assert resume["file_name"] == "resume.txt"
        assert resume["analysis"]["skills_match"] == 6
        assert resume["parsed_data"]["experience"][0]["company"] == "Acme Corp"

    def test_missing_file(self, client):
        response = client.post(
            "/api/resumes/upload",
            files={"attachment": ("resume.txt", b"Python", "text/plain")},
        )
        assert response.status_code == 400

    def test_unsupported_type(self, client):
        response = client.post(
            "/api/resumes/upload",
            files={"resume": ("photo.png", b"\x89PNG", "image/png")},
        )
        assert response.status_code == 415

    def test_blank_file(self, client):
        response = _upload(client, "   \n  ")
        assert response.status_code == 400
        assert response.json()["detail"] == "Could not extract text from file"

    def test_oversize_file(self, client, scenario_resume, monkeypatch):
        monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 10)
        response = _upload(client, scenario_resume)
        assert response.status_code == 413

    def test_file_at_limit_is_accepted(self, client, scenario_resume, monkeypatch):
        monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", len(scenario_resume.encode("utf-8")))
        response = _upload(client, scenario_resume)
        assert response.status_code == 201


class TestResumeCrud:
    def test_list_get_delete(self, client, scenario_resume, rich_resume):
        first = _upload(client, scenario_resume, "john.txt").json()["resume"]
        second = _upload(client, rich_resume, "jane.txt").json()["resume"]

        listing = client.get("/api/resumes").json()
        assert [item["id"] for item in listing] == [second["id"], first["id"]]

        fetched = client.get(f"/api/resumes/{first['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["parsed_data"]["name"] == "John Smith"

        deleted = client.delete(f"/api/resumes/{first['id']}")
        assert deleted.status_code == 200
        assert client.get(f"/api/resumes/{first['id']}").status_code == 404
        assert client.delete(f"/api/resumes/{first['id']}").status_code == 404

    def test_reanalyze(self, client, scenario_resume):
        created = _upload(client, scenario_resume).json()["resume"]

        response = client.post(f"/api/resumes/{created['id']}/analyze")

        assert response.status_code == 200
        resume = response.json()["resume"]
        assert resume["analysis"] == created["analysis"]
        assert resume["last_analyzed"] >= created["last_analyzed"]

    def test_reanalyze_unknown(self, client):
        assert client.post("/api/resumes/missing/analyze").status_code == 404


class TestAnalysisEndpoints:
    def test_analyze_text(self, client, scenario_resume):
        response = client.post("/api/analysis/text", json={"text": scenario_resume})

        assert response.status_code == 200
        analysis = response.json()["analysis"]
        assert analysis["analysis"]["experience_relevance"] == 5
        assert len(api.STORE) == 0

    @pytest.mark.parametrize("payload", [{"text": "   "}, {}])
    def test_analyze_blank_text(self, client, payload):
        response = client.post("/api/analysis/text", json=payload)
        assert response.status_code == 400

    def test_stats(self, client, scenario_resume, rich_resume):
        _upload(client, scenario_resume)
        _upload(client, rich_resume)

        stats = client.get("/api/analysis/stats").json()

        assert stats["total_resumes"] == 2
        assert stats["average_score"] == pytest.approx(44.0)

    def test_compare(self, client, scenario_resume, rich_resume):
        john = _upload(client, scenario_resume).json()["resume"]
        jane = _upload(client, rich_resume).json()["resume"]

        response = client.get(f"/api/analysis/compare/{john['id']}/{jane['id']}")

        assert response.status_code == 200
        assert response.json()["comparison"]["score_difference"] == -26
        assert client.get(f"/api/analysis/compare/{john['id']}/missing").status_code == 404

    def test_skills(self, client, rich_resume):
        _upload(client, rich_resume)
        body = client.get("/api/analysis/skills").json()

        assert {"skill": "kubernetes", "count": 1} in body["skill_categories"]["cloud"]

    def test_recommendations(self, client, scenario_resume):
        john = _upload(client, scenario_resume).json()["resume"]

        body = client.get(f"/api/analysis/recommendations/{john['id']}").json()

        assert body["current"] == john["analysis"]["recommendations"]
        assert len(body["improvement_tips"]) == 3
        assert client.get("/api/analysis/recommendations/missing").status_code == 404

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "resumes": 0}
