#!/usr/bin/env python3
"""
API tests for /api/jobs.
"""


NEW_JOB = {
    "owner_id": "company-1",
    "title": "Platform Engineer",
    "company": "Hooli",
    "location_text": "Remote",
    "is_remote": True,
    "salary_min": 90000,
    "required_skills": ["kubernetes", "go"]
}


class TestJobsEndpoints:

    def test_create_and_get_job(self, client):
        response = client.post("/api/jobs", json=NEW_JOB)

        assert response.status_code == 201
        job = response.json()["job"]
        assert job["status"] == "OPEN"
        assert job["salary_min"] == 90000.0
        assert job["required_skills"] == ["kubernetes", "go"]

        fetched = client.get(f"/api/jobs/{job['job_id']}").json()["job"]
        assert fetched["title"] == "Platform Engineer"

    def test_created_job_appears_in_feed(self, client):
        job_id = client.post("/api/jobs", json=NEW_JOB).json()["job"]["job_id"]

        jobs = client.get("/api/feed/u1").json()["jobs"]

        assert [job["job_id"] for job in jobs] == [job_id]

    def test_list_jobs_by_status(self, client, job_factory):
        job_factory(title="Open One")
        job_factory(title="Closed One", status="CLOSED")

        open_jobs = client.get("/api/jobs").json()
        closed_jobs = client.get("/api/jobs", params={"status": "CLOSED"}).json()

        assert [job["title"] for job in open_jobs["jobs"]] == ["Open One"]
        assert open_jobs["count"] == 1
        assert [job["title"] for job in closed_jobs["jobs"]] == ["Closed One"]

    def test_unknown_job_is_404(self, client):
        response = client.get("/api/jobs/missing")

        assert response.status_code == 404
        assert response.json()["type"] == "JobNotFoundException"

    def test_owner_can_close_job(self, client, job_factory):
        job_id = job_factory(owner_id="company-1")

        response = client.patch(f"/api/jobs/{job_id}/status", json={"status": "CLOSED", "owner_id": "company-1"})

        assert response.status_code == 200
        assert response.json()["job"]["status"] == "CLOSED"
        assert client.get("/api/feed/u1").json()["jobs"] == []

    def test_other_owner_is_403(self, client, job_factory):
        job_id = job_factory(owner_id="company-1")

        response = client.patch(f"/api/jobs/{job_id}/status", json={"status": "CLOSED", "owner_id": "company-2"})

        assert response.status_code == 403
        assert response.json()["type"] == "PermissionDeniedException"

    def test_invalid_status_rejected(self, client, job_factory):
        job_id = job_factory()
        assert client.patch(f"/api/jobs/{job_id}/status", json={"status": "ARCHIVED"}).status_code == 422

    def test_owner_can_edit_job(self, client, job_factory):
        job_id = job_factory(owner_id="company-1", title="Old Title", description="Keep me")

        response = client.patch(f"/api/jobs/{job_id}", json={
            "owner_id": "company-1",
            "title": "New Title",
            "salary_max": 120000,
        })

        assert response.status_code == 200
        job = response.json()["job"]
        assert job["title"] == "New Title"
        assert job["salary_max"] == 120000.0
        assert job["description"] == "Keep me"

    def test_edit_by_other_owner_is_403(self, client, job_factory):
        job_id = job_factory(owner_id="company-1", title="Old Title")

        response = client.patch(f"/api/jobs/{job_id}", json={"owner_id": "company-2", "title": "Hijacked"})

        assert response.status_code == 403
        assert client.get(f"/api/jobs/{job_id}").json()["job"]["title"] == "Old Title"

    def test_edit_cannot_clear_required_field(self, client, job_factory):
        job_id = job_factory()

        response = client.patch(f"/api/jobs/{job_id}", json={"title": None})

        assert response.status_code == 400
        assert response.json()["type"] == "InvalidRequestException"

    def test_edit_unknown_job_is_404(self, client):
        assert client.patch("/api/jobs/missing", json={"title": "x"}).status_code == 404

    def test_owner_can_delete_job(self, client, job_factory):
        job_id = job_factory(owner_id="company-1")

        response = client.delete(f"/api/jobs/{job_id}", params={"owner_id": "company-1"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(f"/api/jobs/{job_id}").status_code == 404

    def test_delete_by_other_owner_is_403(self, client, job_factory):
        job_id = job_factory(owner_id="company-1")

        response = client.delete(f"/api/jobs/{job_id}", params={"owner_id": "company-2"})

        assert response.status_code == 403
        assert client.get(f"/api/jobs/{job_id}").status_code == 200

    def test_deleted_job_leaves_feed(self, client, job_factory):
        keep = job_factory()
        gone = job_factory()

        client.delete(f"/api/jobs/{gone}")

        assert [job["job_id"] for job in client.get("/api/feed/u1").json()["jobs"]] == [keep]

    def test_company_jobs(self, client, job_factory):
        first = job_factory(owner_id="company-1")
        job_factory(owner_id="company-2")
        closed = job_factory(owner_id="company-1", status="CLOSED")

        body = client.get("/api/jobs/company/company-1").json()
        open_only = client.get("/api/jobs/company/company-1", params={"status": "OPEN"}).json()

        assert [job["job_id"] for job in body["jobs"]] == [closed, first]
        assert body["count"] == 2
        assert [job["job_id"] for job in open_only["jobs"]] == [first]

    def test_company_jobs_blank_owner_is_400(self, client):
        assert client.get("/api/jobs/company/%20").status_code == 400


class TestJobSearch:

    def test_search_combines_filters(self, client, job_factory):
        match = job_factory(is_remote=True, job_type="Full-time", salary_min=90000,
                            salary_max=130000, required_skills=["Python", "AWS"])
        job_factory(is_remote=False, job_type="Full-time", salary_min=90000,
                    salary_max=130000, required_skills=["Python"])
        job_factory(is_remote=True, job_type="Full-time", salary_min=30000,
                    salary_max=50000, required_skills=["Python"])
        job_factory(is_remote=True, job_type="Full-time", salary_min=90000,
                    salary_max=130000, required_skills=["Java"])

        response = client.get("/api/jobs/search", params={
            "is_remote": True,
            "job_type": "Full-time",
            "min_salary": 100000,
            "skills": ["python"],
        })

        assert response.status_code == 200
        assert [job["job_id"] for job in response.json()["jobs"]] == [match]

    def test_search_accepts_several_skills(self, client, job_factory):
        go = job_factory(required_skills=["Golang"])
        rust = job_factory(required_skills=["Rust"])
        job_factory(required_skills=["PHP"])

        jobs = client.get("/api/jobs/search", params=[("skills", "go"), ("skills", "RUST")]).json()["jobs"]

        assert [job["job_id"] for job in jobs] == [rust, go]

    def test_search_excludes_closed_by_default(self, client, job_factory):
        job_factory(status="CLOSED")

        assert client.get("/api/jobs/search").json()["count"] == 0



def test_health(client):
    assert client.get("/health").json() == {"status": "healthy", "service": "jobswipe-api"}
