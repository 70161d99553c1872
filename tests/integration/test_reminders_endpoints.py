"""
Integration tests for reminder endpoints.

Tests cover:
- Reminder CRUD scoped to the patient
- Upcoming list (active only, soonest first, at most five)
- Toggling a reminder on and off
"""

from datetime import datetime, timedelta


def _at(hours: float) -> str:
    return (datetime.utcnow() + timedelta(hours=hours)).replace(microsecond=0).isoformat()


def _create(client, headers, **overrides):
    payload = {"type": "hydration", "title": "Drink water", "scheduled_at": _at(1), **overrides}
    response = client.post("/api/reminders", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestReminderCrud:
    """Tests for /api/reminders CRUD."""

    def test_create_and_list(self, client, patient_headers):
        created = _create(client, patient_headers, message="One glass")
        assert created["is_active"] is True
        assert created["type"] == "hydration"
        assert created["next_at"] is not None

        reminders = client.get("/api/reminders", headers=patient_headers).json()["reminders"]
        assert [r["id"] for r in reminders] == [created["id"]]

    def test_unknown_type_rejected(self, client, patient_headers):
        response = client.post(
            "/api/reminders",
            json={"type": "alarm", "title": "X", "scheduled_at": _at(1)},
            headers=patient_headers,
        )
        assert response.status_code == 422

    def test_delete(self, client, patient_headers):
        reminder = _create(client, patient_headers)

        assert client.delete(f"/api/reminders/{reminder['id']}", headers=patient_headers).status_code == 200
        assert client.get("/api/reminders", headers=patient_headers).json()["reminders"] == []
        assert client.delete(f"/api/reminders/{reminder['id']}", headers=patient_headers).status_code == 404

    def test_viewer_cannot_manage_reminders(self, client, viewer_headers):
        assert client.get("/api/reminders", headers=viewer_headers).status_code == 403


class TestToggle:
    def test_toggle_flips_active(self, client, patient_headers):
        reminder = _create(client, patient_headers)

        off = client.post(f"/api/reminders/{reminder['id']}/toggle", headers=patient_headers)
        on = client.post(f"/api/reminders/{reminder['id']}/toggle", headers=patient_headers)

        assert off.json()["is_active"] is False
        assert on.json()["is_active"] is True

    def test_toggle_unknown_404(self, client, patient_headers):
        assert client.post("/api/reminders/missing/toggle", headers=patient_headers).status_code == 404


class TestUpcoming:
    """Tests for GET /api/reminders/upcoming."""

    def test_soonest_five_active(self, client, patient_headers):
        for hours in (6, 2, 4, 1, 5, 3, 7):
            _create(client, patient_headers, title=f"in {hours}h", scheduled_at=_at(hours))
        _create(client, patient_headers, title="past", scheduled_at=_at(-2))
        paused = _create(client, patient_headers, title="paused", scheduled_at=_at(0.5))
        client.post(f"/api/reminders/{paused['id']}/toggle", headers=patient_headers)

        reminders = client.get("/api/reminders/upcoming", headers=patient_headers).json()["reminders"]

        assert [r["title"] for r in reminders] == ["in 1h", "in 2h", "in 3h", "in 4h", "in 5h"]

    def test_recurring_reminder_rolls_forward(self, client, patient_headers):
        _create(client, patient_headers, title="daily pills", scheduled_at=_at(-26), recurring=True)

        reminders = client.get("/api/reminders/upcoming", headers=patient_headers).json()["reminders"]

        assert [r["title"] for r in reminders] == ["daily pills"]
        next_at = datetime.fromisoformat(reminders[0]["next_at"])
        assert datetime.utcnow() - timedelta(minutes=1) <= next_at <= datetime.utcnow() + timedelta(days=1)
