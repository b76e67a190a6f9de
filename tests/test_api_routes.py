"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from inclusive_hiring.api.main import create_app
from inclusive_hiring.service import create_service
from inclusive_hiring.storage.memory import InMemoryGateway


def auth(uid: str) -> dict:
    return {"Authorization": f"Bearer {uid}"}


class TestMarketplaceAPI:
    """End-to-end flows through the FastAPI routes."""

    @pytest.fixture
    def client(self):
        app = create_app(service=create_service(InMemoryGateway()))
        with TestClient(app) as client:
            yield client

    def post_frontend_job(self, client) -> dict:
        response = client.put(
            "/api/v1/profiles/employer", json={"company_name": "Tech Corp"}, headers=auth("employer-1")
        )
        assert response.status_code == 200

        response = client.post(
            "/api/v1/jobs",
            json={
                "title": "Frontend Developer",
                "location": "Remote",
                "accessibility_tags": "Remote, Flexible Hours",
                "flexible_hours": True
            },
            headers=auth("employer-1")
        )
        assert response.status_code == 201
        return response.json()

    def sign_in_candidate(self, client, uid: str = "cand-1") -> None:
        response = client.post(
            "/api/v1/profiles/identity",
            json={"role": "candidate", "display_name": "Asha"},
            headers=auth(uid)
        )
        assert response.status_code == 200
        assert response.json()["uid"] == uid

    def test_health_check(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["components"]["gateway"] == "InMemoryGateway"

    def test_post_and_search_jobs(self, client):
        job = self.post_frontend_job(client)

        assert job["company_name"] == "Tech Corp"
        assert job["accessibility_tags"] == ["Remote", "Flexible Hours"]
        assert job["is_remote"] is True

        response = client.get("/api/v1/jobs", params={"text": "frontend", "facets": ["remote", "flexible_hours"]})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["total_count"] == 1
        assert body["jobs"][0]["id"] == job["id"]
        assert body["search_metadata"]["facets"] == ["flexible_hours", "remote"]

        response = client.get("/api/v1/jobs", params={"facets": "screen_reader"})
        assert response.json()["total_count"] == 0

    def test_unknown_facet_is_validation_error(self, client):
        response = client.get("/api/v1/jobs", params={"facets": "wheelchair"})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_post_job_requires_identity(self, client):
        response = client.post("/api/v1/jobs", json={"title": "Tester"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_post_job_with_blank_title_is_bad_request(self, client):
        self.post_frontend_job(client)

        response = client.post("/api/v1/jobs", json={"title": " "}, headers=auth("employer-1"))

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_argument"

    def test_unknown_job_is_not_found(self, client):
        response = client.get("/api/v1/jobs/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_application_flow(self, client):
        job = self.post_frontend_job(client)
        self.sign_in_candidate(client)

        response = client.post("/api/v1/applications", json={"job_id": job["id"]}, headers=auth("cand-1"))
        assert response.status_code == 201
        application = response.json()
        assert application["status"] == "Applied"
        assert application["job_title"] == "Frontend Developer"

        response = client.post("/api/v1/applications", json={"job_id": job["id"]}, headers=auth("cand-1"))
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

        transition_url = f"/api/v1/applications/{application['id']}/transition"
        response = client.post(transition_url, json={"status": "UnderReview"}, headers=auth("employer-2"))
        assert response.status_code == 403

        response = client.post(transition_url, json={"status": "UnderReview"}, headers=auth("employer-1"))
        assert response.status_code == 200
        assert response.json()["status"] == "UnderReview"

        response = client.post(transition_url, json={"status": "Applied"}, headers=auth("employer-1"))
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"

    def test_apply_without_profile_is_unauthenticated(self, client):
        job = self.post_frontend_job(client)

        response = client.post("/api/v1/applications", json={"job_id": job["id"]}, headers=auth("stranger"))

        assert response.status_code == 401

    def test_candidate_views_and_withdraws_own_applications(self, client):
        job = self.post_frontend_job(client)
        self.sign_in_candidate(client)
        application = client.post(
            "/api/v1/applications", json={"job_id": job["id"]}, headers=auth("cand-1")
        ).json()

        response = client.get(
            "/api/v1/candidates/cand-1/applications", params={"status": "Applied"}, headers=auth("cand-1")
        )
        assert [item["id"] for item in response.json()] == [application["id"]]

        response = client.get("/api/v1/candidates/cand-1/applications", headers=auth("cand-2"))
        assert response.status_code == 403

        response = client.get(f"/api/v1/applications/{application['id']}", headers=auth("employer-1"))
        assert response.status_code == 200

        response = client.post(
            f"/api/v1/applications/{application['id']}/withdraw", json={}, headers=auth("cand-1")
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Withdrawn"

    def test_employer_dashboard(self, client):
        job = self.post_frontend_job(client)
        self.sign_in_candidate(client)
        client.post("/api/v1/applications", json={"job_id": job["id"]}, headers=auth("cand-1"))

        response = client.get("/api/v1/employers/employer-1/dashboard", headers=auth("employer-1"))
        assert response.status_code == 200
        stats = response.json()
        assert stats["active_job_count"] == 1
        assert stats["total_applications"] == 1
        assert stats["applications_by_status"]["Applied"] == 1

        response = client.get("/api/v1/employers/employer-1/dashboard", headers=auth("cand-1"))
        assert response.status_code == 403

        response = client.get(f"/api/v1/jobs/{job['id']}/applications", headers=auth("employer-1"))
        assert len(response.json()) == 1

        response = client.get("/api/v1/employers/employer-1/jobs")
        assert [item["id"] for item in response.json()] == [job["id"]]

    def test_courses(self, client):
        response = client.post(
            "/api/v1/courses",
            json={"name": "Screen Reader Basics", "level": "Beginner", "formats": {"audio": True}},
            headers=auth("admin")
        )
        assert response.status_code == 201
        assert response.json()["formats"]["audio"] is True

        response = client.get("/api/v1/courses", params={"text": "screen", "level": "Beginner"})
        assert [course["name"] for course in response.json()] == ["Screen Reader Basics"]

        response = client.get("/api/v1/courses", params={"level": "Advanced"})
        assert response.json() == []

    def test_application_responses_omit_retry_key(self, client):
        job = self.post_frontend_job(client)
        self.sign_in_candidate(client)

        response = client.post(
            "/api/v1/applications",
            json={"job_id": job["id"], "idempotency_key": "req-1"},
            headers=auth("cand-1")
        )
        assert response.status_code == 201
        assert "idempotency_key" not in response.json()

        retry = client.post(
            "/api/v1/applications",
            json={"job_id": job["id"], "idempotency_key": "req-1"},
            headers=auth("cand-1")
        )
        assert retry.status_code == 201
        assert retry.json()["id"] == response.json()["id"]

        listed = client.get(f"/api/v1/jobs/{job['id']}/applications", headers=auth("employer-1"))
        assert all("idempotency_key" not in item for item in listed.json())

    def test_employer_cannot_self_verify(self, client):
        response = client.put(
            "/api/v1/profiles/employer",
            json={"company_name": "Acme", "verified": True},
            headers=auth("employer-1")
        )

        assert response.status_code == 200
        assert response.json()["verified"] is False
        assert response.json()["company_name"] == "Acme"

    def test_camel_case_facet_query(self, client):
        job = self.post_frontend_job(client)

        response = client.get("/api/v1/jobs", params={"facets": "flexibleHours"})

        assert [item["id"] for item in response.json()["jobs"]] == [job["id"]]
