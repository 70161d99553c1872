"""
Integration tests for family viewer access.

Tests cover:
- Granting, updating and revoking viewer access
- Permission-filtered progress summaries
- Linking an invited email on first visit
"""

from datetime import date


def _grant(client, headers, **overrides):
    payload = {"email": "family@example.com", "name": "Sam", "relationship": "sibling", **overrides}
    response = client.post("/api/family", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _check_in(client, headers):
    response = client.post(
        "/api/recovery",
        json={
            "medicine_adherence_percent": 90,
            "exercise_completion_percent": 60,
            "pain_score": 4,
            "mood": "good",
            "swelling": "mild",
        },
        headers=headers,
    )
    assert response.status_code == 200


class TestManageViewers:
    """Tests for the patient-side /api/family endpoints."""

    def test_grant_links_existing_viewer_account(self, client, patient_headers, viewer_user):
        data = _grant(client, patient_headers, email="Family@Example.com")
        assert data["email"] == "family@example.com"
        assert data["is_linked"] is True
        assert data["permissions"]["can_view_progress"] is True
        assert data["permissions"]["can_view_pain_score"] is False

    def test_list_viewers(self, client, patient_headers):
        _grant(client, patient_headers)
        _grant(client, patient_headers, email="friend@example.com")

        viewers = client.get("/api/family", headers=patient_headers).json()["viewers"]
        assert {v["email"] for v in viewers} == {"family@example.com", "friend@example.com"}

    def test_update_permissions(self, client, patient_headers):
        grant = _grant(client, patient_headers)

        response = client.put(
            f"/api/family/{grant['id']}/permissions",
            json={"can_view_pain_score": True, "update_frequency": "weekly"},
            headers=patient_headers,
        )

        assert response.status_code == 200
        permissions = response.json()["permissions"]
        assert permissions["can_view_pain_score"] is True
        assert permissions["update_frequency"] == "weekly"
        assert permissions["can_view_mood"] is True

    def test_update_unknown_grant_404(self, client, patient_headers):
        response = client.put("/api/family/missing/permissions", json={"can_view_mood": False}, headers=patient_headers)
        assert response.status_code == 404

    def test_revoke_hides_viewer(self, client, patient_headers):
        grant = _grant(client, patient_headers)

        assert client.delete(f"/api/family/{grant['id']}", headers=patient_headers).status_code == 200
        assert client.get("/api/family", headers=patient_headers).json()["viewers"] == []
        assert client.delete(f"/api/family/{grant['id']}", headers=patient_headers).status_code == 404

    def test_viewer_cannot_manage_grants(self, client, viewer_headers):
        assert client.get("/api/family", headers=viewer_headers).status_code == 403


class TestViewerProgress:
    """Tests for GET /api/family/progress/{patient_id}."""

    def test_default_permissions(self, client, patient_user, patient_headers, viewer_headers):
        _grant(client, patient_headers)
        _check_in(client, patient_headers)

        response = client.get(f"/api/family/progress/{patient_user.id}", headers=viewer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["patient_name"] == "Test Patient"
        assert data["days_since_surgery"] == 10
        assert data["recovery_score"] > 0
        assert data["current_mood"] == "good"
        assert data["last_check_in"] == date.today().isoformat()
        assert data["pain_score"] is None
        assert data["medicine_adherence_percent"] is None

    def test_extra_permissions_reveal_fields(self, client, patient_user, patient_headers, viewer_headers):
        _grant(
            client,
            patient_headers,
            permissions={"can_view_pain_score": True, "can_view_medications": True, "can_view_mood": False},
        )
        _check_in(client, patient_headers)

        data = client.get(f"/api/family/progress/{patient_user.id}", headers=viewer_headers).json()

        assert data["pain_score"] == 4
        assert data["medicine_adherence_percent"] == 90
        assert data["current_mood"] is None

    def test_no_grant_is_forbidden(self, client, patient_user, viewer_headers):
        response = client.get(f"/api/family/progress/{patient_user.id}", headers=viewer_headers)
        assert response.status_code == 403

    def test_revoked_grant_is_forbidden(self, client, patient_user, patient_headers, viewer_headers):
        grant = _grant(client, patient_headers)
        client.delete(f"/api/family/{grant['id']}", headers=patient_headers)

        response = client.get(f"/api/family/progress/{patient_user.id}", headers=viewer_headers)
        assert response.status_code == 403

    def test_invited_email_links_after_registration(self, client, patient_user, patient_headers):
        grant = _grant(client, patient_headers, email="newcomer@example.com")
        assert grant["is_linked"] is False

        token = client.post(
            "/api/auth/register",
            json={
                "email": "newcomer@example.com",
                "name": "Newcomer",
                "password": "LongEnough1",
                "role": "family_viewer",
            },
        ).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        assert client.get(f"/api/family/progress/{patient_user.id}", headers=headers).status_code == 200
        viewers = client.get("/api/family", headers=patient_headers).json()["viewers"]
        assert viewers[0]["is_linked"] is True

    def test_patient_account_with_invited_email_is_forbidden(self, client, patient_user, patient_headers):
        _check_in(client, patient_headers)
        _grant(client, patient_headers, email="mom@example.com")

        token = client.post(
            "/api/auth/register",
            json={"email": "mom@example.com", "name": "Not Mom", "password": "LongEnough1", "role": "patient"},
        ).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get(f"/api/family/progress/{patient_user.id}", headers=headers)
        assert response.status_code == 403
        viewers = client.get("/api/family", headers=patient_headers).json()["viewers"]
        assert viewers[0]["is_linked"] is False


class TestDuplicateGrants:
    """One active grant per email and patient."""

    def test_duplicate_email_conflicts(self, client, patient_headers):
        _grant(client, patient_headers)

        response = client.post(
            "/api/family", json={"email": "FAMILY@example.com", "name": "Sam again"}, headers=patient_headers
        )

        assert response.status_code == 409
        assert len(client.get("/api/family", headers=patient_headers).json()["viewers"]) == 1

    def test_regrant_after_revoke(self, client, patient_user, patient_headers, viewer_headers):
        grant = _grant(client, patient_headers)
        client.delete(f"/api/family/{grant['id']}", headers=patient_headers)

        _grant(client, patient_headers)

        assert client.get(f"/api/family/progress/{patient_user.id}", headers=viewer_headers).status_code == 200
