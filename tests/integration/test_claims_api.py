# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for claim, review and user API endpoints."""

import uuid
from decimal import Decimal

import pytest

from src.models import ClaimStatus


def approve(client, claim_id, **body):
    return client.post(f"/api/v1/claims/{claim_id}/approve", json=body)


class TestAuthEndpoints:
    """Tests for /api/v1/auth."""

    def test_login_invalid_credentials(self, client, lecturer):
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "lecturer", "password": "wrong"},
        )
        assert response.status_code == 401

    def test_me_includes_role_permissions(self, lecturer_client):
        response = lecturer_client.get("/api/v1/auth/me")
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["username"] == "lecturer"
        assert user["role"] == "lecturer"
        assert "claim.submit" in user["permissions"]
        assert "claim.review" not in user["permissions"]

    def test_logout(self, lecturer_client):
        response = lecturer_client.post("/api/v1/auth/logout")
        assert response.status_code == 204
        assert lecturer_client.get("/api/v1/auth/me").status_code == 401

    def test_requires_authentication(self, client):
        assert client.get("/api/v1/claims").status_code == 401

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestClaimEndpoints:
    """Tests for /api/v1/claims."""

    def test_submit_claim(self, lecturer_client):
        response = lecturer_client.post(
            "/api/v1/claims",
            json={
                "period": "2025-05",
                "hours_worked": "40",
                "hourly_rate": "150",
                "additional_notes": "Semester block",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["total_amount"]) == Decimal("6000")
        assert data["status"] == "pending"
        assert data["status_badge_class"] == "bg-warning"
        assert data["formatted_period"] == "May 2025"
        assert data["formatted_processing_time"] == "Not yet resolved"
        assert data["approval_date"] is None
        assert data["version"] == 1

    def test_submit_claim_validation(self, lecturer_client):
        response = lecturer_client.post(
            "/api/v1/claims",
            json={"period": "2025-05", "hours_worked": "0", "hourly_rate": "150"},
        )
        assert response.status_code == 422

    def test_reviewer_cannot_submit(self, manager_client):
        response = manager_client.post(
            "/api/v1/claims",
            json={"period": "2025-05", "hours_worked": "4", "hourly_rate": "150"},
        )
        assert response.status_code == 403

    def test_list_is_scoped(
        self, client, login_as, lecturer, other_lecturer, coordinator, make_claim
    ):
        own = make_claim(lecturer)
        make_claim(other_lecturer)

        login_as("lecturer")
        ids = [c["id"] for c in client.get("/api/v1/claims").json()]
        assert ids == [str(own.id)]

        login_as("coordinator")
        ids = [c["id"] for c in client.get("/api/v1/claims").json()]
        assert ids == [str(own.id)]

    def test_list_filters(self, manager_client, lecturer, other_lecturer, make_claim):
        may = make_claim(lecturer, period="2025-05-01")
        make_claim(other_lecturer, period="2025-06-01")

        response = manager_client.get("/api/v1/claims", params={"period": "2025-05"})
        assert [c["id"] for c in response.json()] == [str(may.id)]

        response = manager_client.get("/api/v1/claims", params={"lecturer": "gibbon"})
        assert len(response.json()) == 1
        assert response.json()[0]["lecturer"]["full_name"] == "Edward Gibbon"

        response = manager_client.get("/api/v1/claims", params={"status": "approved"})
        assert response.json() == []

    def test_list_bad_period(self, manager_client):
        response = manager_client.get("/api/v1/claims", params={"period": "May"})
        assert response.status_code == 400

    @pytest.mark.parametrize("period", ["2025-13", "2025-00"])
    def test_list_period_month_out_of_range(self, manager_client, period):
        response = manager_client.get("/api/v1/claims", params={"period": period})
        assert response.status_code == 400
        assert response.json()["detail"] == "Period must be given as YYYY-MM"

    def test_get_claim_outside_scope(
        self, client, login_as, lecturer, other_lecturer, make_claim
    ):
        foreign = make_claim(other_lecturer)
        login_as("lecturer")
        assert client.get(f"/api/v1/claims/{foreign.id}").status_code == 404
        assert client.get(f"/api/v1/claims/{uuid.uuid4()}").status_code == 404

    def test_update_pending_claim(self, lecturer_client, claim):
        response = lecturer_client.put(
            f"/api/v1/claims/{claim.id}", json={"hours_worked": "10"}
        )
        assert response.status_code == 200
        assert Decimal(response.json()["total_amount"]) == Decimal("1500")

    def test_update_with_stale_version(self, lecturer_client, claim):
        response = lecturer_client.put(
            f"/api/v1/claims/{claim.id}",
            params={"version": 7},
            json={"hours_worked": "10"},
        )
        assert response.status_code == 409

    def test_update_decided_claim(self, client, login_as, lecturer, manager, claim):
        login_as("manager")
        approve(client, claim.id, notes="ok")

        login_as("lecturer")
        response = client.put(f"/api/v1/claims/{claim.id}", json={"hours_worked": "10"})
        assert response.status_code == 400

    def test_upload_and_download_document(self, lecturer_client, claim):
        response = lecturer_client.post(
            f"/api/v1/claims/{claim.id}/documents",
            files={"file": ("timesheet.pdf", b"%PDF-1.7 data", "application/pdf")},
            data={"description": "Signed timesheet"},
        )
        assert response.status_code == 201
        document = response.json()
        assert document["original_file_name"] == "timesheet.pdf"
        assert document["file_size_formatted"] == "13 B"
        assert document["file_icon"] == "fas fa-file-pdf text-danger"

        response = lecturer_client.get(
            f"/api/v1/claims/{claim.id}/documents/{document['id']}"
        )
        assert response.status_code == 200
        assert response.content == b"%PDF-1.7 data"

        detail = lecturer_client.get(f"/api/v1/claims/{claim.id}").json()
        assert [d["id"] for d in detail["supporting_documents"]] == [document["id"]]

    def test_upload_rejects_disallowed_type(self, lecturer_client, claim):
        response = lecturer_client.post(
            f"/api/v1/claims/{claim.id}/documents",
            files={"file": ("macro.exe", b"MZ", "application/octet-stream")},
        )
        assert response.status_code == 400

    def test_download_missing_document(self, lecturer_client, claim):
        response = lecturer_client.get(
            f"/api/v1/claims/{claim.id}/documents/{uuid.uuid4()}"
        )
        assert response.status_code == 404


class TestReviewEndpoints:
    """Tests for approve, reject, review and status endpoints."""

    def test_approve(self, manager_client, claim):
        response = approve(manager_client, claim.id, notes="ok")
        assert response.status_code == 200
        data = response.json()
        assert data["changed"] is True
        assert data["claim"]["status"] == "approved"
        assert data["claim"]["approved_by"] == "manager"
        assert data["claim"]["approval_notes"] == "ok"
        assert data["claim"]["approval_date"] is not None
        assert data["claim"]["version"] == 2
        assert data["claim"]["processing_days"] >= 0

    def test_approve_twice_is_a_warning(self, manager_client, claim):
        approve(manager_client, claim.id)
        response = approve(manager_client, claim.id)

        assert response.status_code == 200
        data = response.json()
        assert data["changed"] is False
        assert "already approved" in data["message"]

        history = manager_client.get(f"/api/v1/claims/{claim.id}/history").json()
        assert len(history) == 1

    def test_reject_requires_notes(self, manager_client, claim):
        response = manager_client.post(
            f"/api/v1/claims/{claim.id}/reject", json={"notes": "   "}
        )
        assert response.status_code == 400

    def test_reject_after_approval_is_invalid(self, manager_client, claim):
        approve(manager_client, claim.id)
        response = manager_client.post(
            f"/api/v1/claims/{claim.id}/reject", json={"notes": "reconsidered"}
        )
        assert response.status_code == 400

    def test_stale_version_conflict(self, manager_client, claim):
        response = approve(manager_client, claim.id, version=99)
        assert response.status_code == 409

    def test_lecturer_cannot_review(self, lecturer_client, claim):
        assert approve(lecturer_client, claim.id).status_code == 403

    def test_coordinator_limited_to_department(
        self, client, login_as, coordinator, other_lecturer, make_claim
    ):
        foreign = make_claim(other_lecturer)
        login_as("coordinator")
        assert approve(client, foreign.id).status_code == 404

    def test_review_then_history(self, manager_client, claim):
        response = manager_client.post(
            f"/api/v1/claims/{claim.id}/review",
            json={"notes": "Please attach the timesheet"},
        )
        assert response.json()["claim"]["status"] == "under_review"
        assert response.json()["claim"]["review_notes"] == "Please attach the timesheet"

        approve(manager_client, claim.id, notes="Thanks")

        history = manager_client.get(f"/api/v1/claims/{claim.id}/history").json()
        assert [h["sequence"] for h in history] == [2, 1]
        assert history[0]["status_change"] == "Under Review → Approved"
        assert history[1]["change_notes"] == "Please attach the timesheet"

        detail = manager_client.get(f"/api/v1/claims/{claim.id}").json()
        assert [h["sequence"] for h in detail["status_history"]] == [2, 1]

    def test_only_hr_can_pay(self, client, login_as, manager, hr_user, claim):
        login_as("manager")
        approve(client, claim.id)
        response = client.post(
            f"/api/v1/claims/{claim.id}/status", json={"status": "paid"}
        )
        assert response.status_code == 403

        login_as("hr")
        response = client.post(
            f"/api/v1/claims/{claim.id}/status", json={"status": "paid"}
        )
        assert response.status_code == 200
        data = response.json()["claim"]
        assert data["status"] == "paid"
        assert data["status_badge_class"] == "bg-primary"
        assert data["approved_by"] == "manager"
        assert data["reviewed_by"] == "hr"

    def test_status_endpoint_requires_reject_notes(self, manager_client, claim):
        response = manager_client.post(
            f"/api/v1/claims/{claim.id}/status", json={"status": "rejected"}
        )
        assert response.status_code == 400

    def test_bulk_approve(self, manager_client, db_session, lecturer, make_claim):
        first = make_claim(lecturer)
        second = make_claim(lecturer)
        approve(manager_client, second.id)
        missing = uuid.uuid4()

        response = manager_client.post(
            "/api/v1/claims/bulk-approve",
            json={"claim_ids": [str(first.id), str(second.id), str(missing)]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["changed"] == [str(first.id)]
        assert data["skipped"] == [str(second.id)]
        assert data["failed"] == [
            {"claim_id": str(missing), "reason": "Claim not found"}
        ]

        db_session.expire_all()
        assert first.status == ClaimStatus.APPROVED

    def test_bulk_approve_requires_ids(self, manager_client):
        response = manager_client.post(
            "/api/v1/claims/bulk-approve", json={"claim_ids": []}
        )
        assert response.status_code == 422


class TestUserEndpoints:
    """Tests for HR user management."""

    def test_create_user(self, hr_client):
        response = hr_client.post(
            "/api/v1/users",
            json={
                "username": "new.lecturer",
                "email": "new@example.com",
                "first_name": "Grace",
                "last_name": "Hopper",
                "department": "Computing",
                "role": "lecturer",
                "password": "ComplexPass1!",
            },
        )
        assert response.status_code == 201
        assert response.json()["full_name"] == "Grace Hopper"

    def test_create_duplicate_user(self, hr_client, lecturer):
        response = hr_client.post(
            "/api/v1/users",
            json={
                "username": "lecturer",
                "email": "someone@example.com",
                "first_name": "A",
                "last_name": "B",
                "password": "ComplexPass1!",
            },
        )
        assert response.status_code == 400

    def test_list_users_requires_permission(self, manager_client):
        assert manager_client.get("/api/v1/users").status_code == 403

    def test_list_users_by_role(self, hr_client, lecturer, other_lecturer):
        response = hr_client.get("/api/v1/users", params={"role": "lecturer"})
        assert {u["username"] for u in response.json()} == {"lecturer", "other"}

    def test_deactivate_user(self, hr_client, lecturer):
        response = hr_client.patch(
            f"/api/v1/users/{lecturer.id}/status", json={"is_active": False}
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_cannot_deactivate_self(self, hr_client, hr_user):
        response = hr_client.patch(
            f"/api/v1/users/{hr_user.id}/status", json={"is_active": False}
        )
        assert response.status_code == 400


    def test_get_user(self, hr_client, lecturer):
        response = hr_client.get(f"/api/v1/users/{lecturer.id}")
        assert response.status_code == 200
        assert response.json()["full_name"] == "Ada Lovelace"
        assert "claim.submit" in response.json()["permissions"]

        assert hr_client.get(f"/api/v1/users/{uuid.uuid4()}").status_code == 404

    def test_update_user_department(
        self, client, login_as, hr_user, lecturer, coordinator, make_claim
    ):
        make_claim(lecturer)
        login_as("hr")
        response = client.patch(
            f"/api/v1/users/{lecturer.id}",
            json={"department": "History", "employee_id": "EMP-7"},
        )
        assert response.status_code == 200
        assert response.json()["department"] == "History"
        assert response.json()["employee_id"] == "EMP-7"

        login_as("coordinator")
        assert client.get("/api/v1/claims").json() == []

    def test_update_user_duplicate_email(self, hr_client, lecturer, other_lecturer):
        response = hr_client.patch(
            f"/api/v1/users/{lecturer.id}", json={"email": other_lecturer.email}
        )
        assert response.status_code == 400

    def test_update_user_requires_permission(self, manager_client, lecturer):
        response = manager_client.patch(
            f"/api/v1/users/{lecturer.id}", json={"department": "History"}
        )
        assert response.status_code == 403

class TestDashboardEndpoint:
    """Tests for GET /api/v1/dashboard/summary."""

    def test_summary(self, manager_client, lecturer, make_claim):
        claim = make_claim(lecturer)
        make_claim(lecturer)
        approve(manager_client, claim.id)

        response = manager_client.get("/api/v1/dashboard/summary")
        assert response.status_code == 200
        data = response.json()
        assert data["total_claims"] == 2
        assert data["open_claims"] == 1
        assert data["status_counts"]["approved"] == 1
        assert data["approved_this_month"] == 1
        assert Decimal(data["approved_amount_this_month"]) == Decimal("6000")
