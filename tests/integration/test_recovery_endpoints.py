"""
Integration tests for daily recovery check-ins.

Tests cover:
- Score computation and once-per-day upsert
- Trend against the trailing seven-day window
- Dashboard stats and exports
"""

import base64
from datetime import date, timedelta

from models.recovery_log import DailyRecoveryLog
from models.user import User

STRONG_DAY = {
    "medicine_adherence_percent": 90,
    "exercise_completion_percent": 80,
    "pain_score": 2,
    "mood": "good",
    "swelling": "none",
}
HARD_DAY = {
    "medicine_adherence_percent": 20,
    "exercise_completion_percent": 10,
    "pain_score": 9,
    "mood": "struggling",
    "swelling": "severe",
}


def _days_ago(n: int) -> str:
    return (date.today() - timedelta(days=n)).isoformat()


def _check_in(client, headers, days_ago: int, values: dict):
    response = client.post("/api/recovery", json={**values, "log_date": _days_ago(days_ago)}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestCheckIn:
    """Tests for POST /api/recovery."""

    def test_scores_check_in(self, client, patient_headers):
        data = _check_in(client, patient_headers, 0, HARD_DAY)
        assert data["recovery_score"] == 37
        assert data["trend"] == "stable"
        assert data["day_number"] == 11
        assert data["log_date"] == date.today().isoformat()

    def test_strong_day_clamps_to_100(self, client, patient_headers):
        assert _check_in(client, patient_headers, 0, STRONG_DAY)["recovery_score"] == 100

    def test_missing_fields_use_defaults(self, client, patient_headers):
        response = client.post("/api/recovery", json={"pain_score": 5}, headers=patient_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["mood"] == "ok"
        assert data["swelling"] == "mild"
        assert 0 <= data["recovery_score"] <= 100

    def test_same_day_is_upserted(self, client, patient_headers, patient_user, test_db):
        first = _check_in(client, patient_headers, 0, HARD_DAY)
        second = _check_in(client, patient_headers, 0, {**STRONG_DAY, "notes": "feeling better"})

        assert second["id"] == first["id"]
        assert second["recovery_score"] == 100
        assert second["notes"] == "feeling better"
        assert test_db.query(DailyRecoveryLog).filter(DailyRecoveryLog.patient_id == patient_user.id).count() == 1

    def test_cached_score_follows_latest_day(self, client, patient_headers, patient_user, test_db):
        _check_in(client, patient_headers, 0, STRONG_DAY)
        _check_in(client, patient_headers, 3, HARD_DAY)  # backfill

        user = test_db.query(User).filter(User.id == patient_user.id).one()
        assert user.recovery_score == 100

    def test_out_of_range_pain_rejected(self, client, patient_headers):
        response = client.post("/api/recovery", json={"pain_score": 11}, headers=patient_headers)
        assert response.status_code == 422

    def test_unknown_mood_rejected(self, client, patient_headers):
        response = client.post("/api/recovery", json={"mood": "elated"}, headers=patient_headers)
        assert response.status_code == 422


class TestTrend:
    """Trend compares today's score with the previous seven days."""

    def test_critical_drop(self, client, patient_headers):
        for days_ago in (3, 2, 1):
            _check_in(client, patient_headers, days_ago, STRONG_DAY)
        assert _check_in(client, patient_headers, 0, HARD_DAY)["trend"] == "critical"

    def test_improving(self, client, patient_headers):
        for days_ago in (3, 2, 1):
            _check_in(client, patient_headers, days_ago, HARD_DAY)
        assert _check_in(client, patient_headers, 0, STRONG_DAY)["trend"] == "improving"

    def test_two_history_days_stay_stable(self, client, patient_headers):
        for days_ago in (2, 1):
            _check_in(client, patient_headers, days_ago, STRONG_DAY)
        assert _check_in(client, patient_headers, 0, HARD_DAY)["trend"] == "stable"

    def test_days_outside_window_ignored(self, client, patient_headers):
        for days_ago in (9, 8, 1):
            _check_in(client, patient_headers, days_ago, STRONG_DAY)
        assert _check_in(client, patient_headers, 0, HARD_DAY)["trend"] == "stable"

    def test_seventh_day_counts(self, client, patient_headers):
        for days_ago in (7, 6, 5):
            _check_in(client, patient_headers, days_ago, STRONG_DAY)
        assert _check_in(client, patient_headers, 0, HARD_DAY)["trend"] == "critical"


class TestReads:
    """Tests for list, latest and dashboard."""

    def test_latest_404_without_check_ins(self, client, patient_headers):
        assert client.get("/api/recovery/latest", headers=patient_headers).status_code == 404

    def test_list_is_newest_first(self, client, patient_headers):
        _check_in(client, patient_headers, 2, HARD_DAY)
        _check_in(client, patient_headers, 0, STRONG_DAY)
        _check_in(client, patient_headers, 1, HARD_DAY)

        logs = client.get("/api/recovery", headers=patient_headers).json()["logs"]
        assert [log["log_date"] for log in logs] == [_days_ago(0), _days_ago(1), _days_ago(2)]

        latest = client.get("/api/recovery/latest", headers=patient_headers).json()
        assert latest["log_date"] == _days_ago(0)

    def test_dashboard(self, client, patient_headers):
        _check_in(client, patient_headers, 1, HARD_DAY)
        _check_in(client, patient_headers, 0, STRONG_DAY)

        data = client.get("/api/recovery/dashboard", headers=patient_headers).json()

        assert data["days_since_surgery"] == 10
        assert data["recovery_score"] == 100
        assert data["recovery_trend"] == "stable"
        assert data["weekly_progress"] == {
            "medicine_adherence": 55,
            "exercise_completion": 45,
            "average_pain_score": 6,
        }

    def test_empty_dashboard(self, client, patient_headers):
        data = client.get("/api/recovery/dashboard", headers=patient_headers).json()
        assert data["recovery_score"] == 0
        assert data["recovery_trend"] == "stable"


class TestExport:
    def test_json_export_oldest_first(self, client, patient_headers):
        _check_in(client, patient_headers, 0, STRONG_DAY)
        _check_in(client, patient_headers, 1, HARD_DAY)

        data = client.get("/api/recovery/export.json", headers=patient_headers).json()

        assert data["disclaimer"]
        assert data["patient"]["name"] == "Test Patient"
        assert [log["log_date"] for log in data["logs"]] == [_days_ago(1), _days_ago(0)]

    def test_pdf_export(self, client, patient_headers):
        _check_in(client, patient_headers, 0, STRONG_DAY)

        data = client.get("/api/recovery/export.pdf", headers=patient_headers).json()

        assert data["content_type"] == "application/pdf"
        assert base64.b64decode(data["base64"]).startswith(b"%PDF")
