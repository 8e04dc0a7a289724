# =============================================================================
# tests/test_api_contributions.py - Contribution, Admin and Program Endpoint Tests
# =============================================================================
# Run with: pytest tests/test_api_contributions.py -v
# =============================================================================

import pytest

from tests.conftest import ADMIN_ID, auth_header

ADMIN = auth_header(ADMIN_ID)


@pytest.fixture
def contributions(store):
    """Six contributions with increasing createdAt: c1 oldest, c6 newest."""
    statuses = ["pending", "approved", "pending", "rejected", "pending", "pending"]
    for n, status in enumerate(statuses, start=1):
        store.seed(
            "programstd", f"c{n}",
            name=f"Program {n}", website=f"https://p{n}.example.org",
            userId="user-3" if n % 2 else "user-4",
            status=status, createdAt=f"2024-02-0{n}T12:00:00+00:00",
        )
    return store


class TestSubmit:
    """POST /api/contributions"""

    def test_submit_and_list_own(self, client, store):
        response = client.post(
            "/api/contributions",
            headers=auth_header("user-3", user_metadata={"full_name": "Third User"}),
            json={"name": "Code Camp", "website": "https://camp.example.org"},
        )

        assert response.status_code == 201
        contribution_id = response.json()["id"]
        record = store.all("programstd")[contribution_id]
        assert record["status"] == "pending"
        assert record["userDisplayName"] == "Third User"

        mine = client.get("/api/contributions/my-contributions", headers=auth_header("user-3"))
        assert [c["id"] for c in mine.json()] == [contribution_id]
        assert mine.json()[0]["status"] == "pending"

    def test_missing_website(self, client):
        response = client.post(
            "/api/contributions", headers=auth_header("user-3"), json={"name": "Code Camp"}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_FAILED"

    def test_malformed_body(self, client):
        response = client.post(
            "/api/contributions", headers=auth_header("user-3"), json={"name": ["x"]}
        )
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestAdminListing:
    """GET /api/admin/contributions"""

    def test_pages_through_all(self, client, contributions):
        first = client.get("/api/admin/contributions?limit=4", headers=ADMIN).json()

        assert [c["id"] for c in first["contributions"]] == ["c6", "c5", "c4", "c3"]
        assert first["pagination"] == {"hasMore": True, "totalCount": 6, "lastId": "c3"}

        second = client.get(
            "/api/admin/contributions?limit=4&lastId=c3", headers=ADMIN
        ).json()

        assert [c["id"] for c in second["contributions"]] == ["c2", "c1"]
        assert second["pagination"]["hasMore"] is False

    def test_exact_page_has_no_more(self, client, contributions):
        data = client.get(
            "/api/admin/contributions?status=pending&limit=4", headers=ADMIN
        ).json()

        assert [c["id"] for c in data["contributions"]] == ["c6", "c5", "c3", "c1"]
        assert data["pagination"]["hasMore"] is False
        assert data["pagination"]["totalCount"] == 4

    def test_invalid_status(self, client, contributions):
        response = client.get("/api/admin/contributions?status=archived", headers=ADMIN)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATUS"

    def test_dashboard_stats(self, client, contributions):
        contributions.seed("programs", "p1", name="Existing")

        data = client.get("/api/admin/dashboard-stats", headers=ADMIN).json()

        assert data["stats"] == {"pending": 4, "approved": 1, "rejected": 1, "totalPrograms": 1}
        assert [c["id"] for c in data["recentContributions"]] == ["c6", "c5", "c4", "c3", "c2"]


class TestModerationEndpoints:
    def test_status_approve_publishes_program(self, client, contributions):
        response = client.put(
            "/api/admin/contributions/c1/status",
            headers=ADMIN,
            json={"status": "approved", "applicationMonth": "June"},
        )

        assert response.status_code == 200
        program_id = response.json()["programId"]

        program = client.get(f"/api/programs/{program_id}").json()
        assert program["name"] == "Program 1"
        assert program["applicationMonth"] == "June"
        assert program["applicationLink"] == "https://p1.example.org"

    def test_status_approve_without_month(self, client, contributions):
        response = client.put(
            "/api/admin/contributions/c1/status", headers=ADMIN, json={"status": "approved"}
        )

        assert response.status_code == 400
        assert contributions.all("programs") == {}

    def test_already_moderated(self, client, contributions):
        response = client.put(
            "/api/admin/contributions/c2/status",
            headers=ADMIN,
            json={"status": "rejected", "reason": "Changed my mind"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"

    def test_reject_shortcut_default_reason(self, client, contributions):
        response = client.put("/api/contributions/admin/reject/c3", headers=ADMIN)

        assert response.json()["status"] == "rejected"
        assert contributions.all("programstd")["c3"]["rejectionReason"] == "Does not meet our criteria"

    def test_approve_shortcut_requires_month(self, client, contributions):
        missing = client.put("/api/contributions/admin/approve/c3", headers=ADMIN, json={})
        ok = client.put(
            "/api/contributions/admin/approve/c3", headers=ADMIN, json={"applicationMonth": "May"}
        )

        assert missing.status_code == 400
        assert ok.status_code == 200

    def test_pending_queue(self, client, contributions):
        data = client.get("/api/contributions/admin/pending", headers=ADMIN).json()
        assert [c["id"] for c in data] == ["c6", "c5", "c3", "c1"]

    def test_non_admin_cannot_moderate(self, client, contributions):
        response = client.put(
            "/api/admin/contributions/c1/status",
            headers=auth_header("user-3"),
            json={"status": "approved", "applicationMonth": "June"},
        )

        assert response.status_code == 403
        assert contributions.all("programstd")["c1"]["status"] == "pending"

    def test_delete_contribution(self, client, contributions):
        assert client.delete("/api/admin/contributions/c4", headers=ADMIN).status_code == 200
        assert client.get("/api/admin/contributions/c4", headers=ADMIN).status_code == 404


class TestPrograms:
    """Public catalog plus admin edits."""

    @pytest.fixture
    def programs(self, store):
        store.seed("programs", "p1", name="Google Summer of Code", applicationMonth="March")
        store.seed("programs", "p2", name="Outreachy", applicationMonth="February")
        store.seed("programs", "p3", name="MLH Fellowship", applicationMonth="March")
        return store

    def test_list_all(self, client, programs):
        assert len(client.get("/api/programs").json()) == 3

    def test_filter_is_case_insensitive(self, client, programs):
        by_name = client.get("/api/programs/filter?search=google").json()
        by_month = client.get("/api/programs/filter?month=MAR").json()

        assert [p["id"] for p in by_name] == ["p1"]
        assert sorted(p["id"] for p in by_month) == ["p1", "p3"]

    def test_unknown_program(self, client, programs):
        response = client.get("/api/programs/nope")

        assert response.status_code == 404
        assert response.json()["code"] == "PROGRAM_NOT_FOUND"

    def test_admin_edit_partial(self, client, programs):
        response = client.put(
            "/api/admin/programs/p2", headers=ADMIN, json={"applicationMonth": "January"}
        )

        assert response.status_code == 200
        assert response.json()["applicationMonth"] == "January"
        assert response.json()["name"] == "Outreachy"

    def test_admin_delete(self, client, programs):
        assert client.delete("/api/admin/programs/p3", headers=ADMIN).status_code == 200
        assert "p3" not in programs.all("programs")
