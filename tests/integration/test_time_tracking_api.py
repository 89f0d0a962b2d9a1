# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for time tracking API endpoints."""

import uuid
from datetime import date, datetime, timedelta

import pytest

from tijdbalans.engine.enums import WorkType

API = "/api/v1/time-tracking"
FUTURE = date.today() + timedelta(days=30)


@pytest.fixture
def overtime_worker(employee, make_entry):
    """Employee with 12 hours of overtime."""
    for day in (8, 9, 10):
        make_entry(
            employee,
            datetime(2024, 1, day, 9),
            datetime(2024, 1, day, 13),
            work_type=WorkType.OVERTIME,
        )
    return employee


@pytest.fixture
def short_week(employee, make_entry):
    """Employee who worked 4 of 5 days in the week of 22 January 2024."""
    for day in (22, 23, 24, 25):
        make_entry(
            employee,
            datetime(2024, 1, day, 9),
            datetime(2024, 1, day, 17, 30),
            break_minutes=30,
        )
    return employee


WEEK_PARAMS = {"from": "2024-01-22", "to": "2024-01-28"}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestBalanceEndpoint:
    """Tests for GET /api/v1/time-tracking/balance."""

    def test_saturday_shift(self, client, employee, make_entry):
        """Test a Saturday shift without logged break."""
        make_entry(employee, datetime(2024, 1, 13, 9), datetime(2024, 1, 13, 17))

        response = client.get(
            f"{API}/balance",
            params={
                "user_id": str(employee.id),
                "from": "2024-01-08",
                "to": "2024-01-14",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["actual_hours"] == 7.5
        assert data["weekend_hours"] == 7.5
        assert data["auto_break_deducted"] == 0.5
        assert data["shortage_hours"] == 32.5
        assert data["formatted"]["actual"] == "7u 30m"
        assert data["period"] == {"start": "2024-01-08", "end": "2024-01-14"}
        assert any(a["type"] == "CRITICAL_SHORTAGE" for a in data["alerts"])

    def test_zero_hours_contract_has_no_productivity(self, client, zero_hours_worker):
        """Test that a zero-hours contract reports no productivity."""
        response = client.get(
            f"{API}/balance",
            params={"user_id": str(zero_hours_worker.id), **WEEK_PARAMS},
        )

        assert response.status_code == 200
        assert response.json()["productivity"] is None
        assert response.json()["shortage_hours"] == 0

    def test_preset_period(self, client, employee):
        """Test the named period parameter."""
        response = client.get(
            f"{API}/balance",
            params={"user_id": str(employee.id), "period": "last_month"},
        )
        assert response.status_code == 200

    def test_unknown_preset(self, client, employee):
        response = client.get(
            f"{API}/balance", params={"user_id": str(employee.id), "period": "forever"}
        )
        assert response.status_code == 422

    def test_incomplete_custom_period(self, client, employee):
        """Test that from without to is rejected."""
        response = client.get(
            f"{API}/balance",
            params={"user_id": str(employee.id), "from": "2024-01-08"},
        )
        assert response.status_code == 400

    def test_reversed_custom_period(self, client, employee):
        response = client.get(
            f"{API}/balance",
            params={
                "user_id": str(employee.id),
                "from": "2024-01-14",
                "to": "2024-01-08",
            },
        )
        assert response.status_code == 400

    def test_unknown_user(self, client, db_session):
        response = client.get(
            f"{API}/balance", params={"user_id": str(uuid.uuid4()), **WEEK_PARAMS}
        )
        assert response.status_code == 404


class TestWeeklyOvertimeEndpoint:
    """Tests for GET /api/v1/time-tracking/weekly-overtime."""

    def test_week_summary(self, client, employee, make_entry):
        make_entry(
            employee,
            datetime(2024, 1, 23, 8),
            datetime(2024, 1, 23, 18),
            break_minutes=30,
        )

        response = client.get(
            f"{API}/weekly-overtime",
            params={"user_id": str(employee.id), "week_of": "2024-01-25"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["week"] == {"start": "2024-01-22", "end": "2024-01-28"}
        assert data["daily_overtime_total"] == 1.5
        assert data["needs_approval"] is True
        assert len(data["daily_breakdown"]) == 1


class TestComplianceEndpoint:
    def test_missing_break(self, client, employee, make_entry):
        """Test that six hours without a break is reported."""
        make_entry(employee, datetime(2024, 1, 22, 9), datetime(2024, 1, 22, 15))

        response = client.get(
            f"{API}/compliance", params={"user_id": str(employee.id), **WEEK_PARAMS}
        )

        assert response.status_code == 200
        assert [w["code"] for w in response.json()] == ["INSUFFICIENT_BREAK"]


class TestShortagesEndpoint:
    """Tests for the shortage endpoints."""

    def test_list(self, client, short_week):
        response = client.get(f"{API}/shortages", params=WEEK_PARAMS)

        assert response.status_code == 200
        data = response.json()
        assert data["critical_count"] == 1
        assert data["warning_count"] == 0
        alert = data["alerts"][0]
        assert alert["user_id"] == str(short_week.id)
        assert alert["user_name"] == "Sanne de Vries"
        assert alert["shortage_hours"] == 8
        assert alert["severity"] == "CRITICAL"

    def test_notify_once(self, client, short_week):
        """Test that a second run sends no new notifications."""
        first = client.post(f"{API}/shortages/notify", params=WEEK_PARAMS)
        second = client.post(f"{API}/shortages/notify", params=WEEK_PARAMS)

        assert first.status_code == 200
        assert first.json()["notifications_sent"] == 1
        assert first.json()["notifications"][0]["message"] == (
            "Je hebt 8u 0m te kort gewerkt"
        )
        assert second.json()["notifications_sent"] == 0

        listed = client.get(f"{API}/shortages", params=WEEK_PARAMS).json()
        assert listed["alerts"][0]["auto_notification_sent"] is True

    def test_malformed_work_pattern_does_not_break_the_team(
        self, client, short_week, make_user
    ):
        make_user("Noor Visser", work_pattern_settings="{bad")

        response = client.get(f"{API}/shortages", params=WEEK_PARAMS)

        assert response.status_code == 200
        assert len(response.json()["alerts"]) == 2

    def test_no_users(self, client, db_session):
        response = client.get(f"{API}/shortages", params=WEEK_PARAMS)

        assert response.status_code == 200
        assert response.json()["alerts"] == []


class TestReportEndpoint:
    def test_report(self, client, short_week, zero_hours_worker):
        """Test the team report over a custom period."""
        response = client.get(f"{API}/report", params=WEEK_PARAMS)

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["total_employees"] == 2
        assert data["summary"]["average_productivity"] == 80
        assert len(data["alerts"]) == 1
        assert {i["type"] for i in data["insights"]} == {
            "PRODUCTIVITY",
            "OVERTIME",
            "SHORTAGE",
        }


class TestCompensationEndpoints:
    """Tests for the compensation endpoints."""

    def test_overview(self, client, overtime_worker):
        response = client.get(
            f"{API}/compensation", params={"user_id": str(overtime_worker.id)}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["earned"] == 12
        assert data["balance"] == 12
        assert data["max_usable_hours"] == 8
        assert data["formatted_balance"] == "12u 0m"
        assert data["pending_requests"] == []

    def test_use(self, client, overtime_worker):
        """Test requesting compensation for one day."""
        response = client.post(
            f"{API}/compensation/use",
            params={"user_id": str(overtime_worker.id)},
            json={"date": FUTURE.isoformat(), "hours": 4, "type": "PERSONAL"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["remaining_balance"] == 8
        assert data["id"] is not None

        overview = client.get(
            f"{API}/compensation", params={"user_id": str(overtime_worker.id)}
        ).json()
        assert [r["id"] for r in overview["pending_requests"]] == [data["id"]]

    def test_use_more_than_available(self, client, overtime_worker):
        response = client.post(
            f"{API}/compensation/use",
            params={"user_id": str(overtime_worker.id)},
            json={"date": FUTURE.isoformat(), "hours": 10},
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["requested"] == 10
        assert detail["available"] == 8
        assert detail["shortfall"] == 2

    @pytest.mark.parametrize("hours", [0, -1])
    def test_use_non_positive_hours(self, client, overtime_worker, hours):
        response = client.post(
            f"{API}/compensation/use",
            params={"user_id": str(overtime_worker.id)},
            json={"date": FUTURE.isoformat(), "hours": hours},
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("path", ["use", "bulk"])
    def test_non_finite_hours(self, client, overtime_worker, path):
        """Test that NaN hours are a bad request rather than a server error."""
        body = {
            "use": f'{{"date": "{FUTURE.isoformat()}", "hours": NaN}}',
            "bulk": f'{{"dates": ["{FUTURE.isoformat()}"], "hours_per_day": NaN}}',
        }[path]

        response = client.post(
            f"{API}/compensation/{path}",
            params={"user_id": str(overtime_worker.id)},
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400

    def test_use_past_date(self, client, overtime_worker):
        response = client.post(
            f"{API}/compensation/use",
            params={"user_id": str(overtime_worker.id)},
            json={"date": "2024-01-01", "hours": 2},
        )

        assert response.status_code == 400
        assert "verleden" in response.json()["detail"]

    def test_use_unknown_user(self, client, db_session):
        response = client.post(
            f"{API}/compensation/use",
            params={"user_id": str(uuid.uuid4())},
            json={"date": FUTURE.isoformat(), "hours": 2},
        )
        assert response.status_code == 404

    def test_bulk_is_all_or_nothing(self, client, overtime_worker):
        """Test that an unaffordable bulk request stores nothing."""
        dates = [(FUTURE + timedelta(days=i)).isoformat() for i in range(3)]

        response = client.post(
            f"{API}/compensation/bulk",
            params={"user_id": str(overtime_worker.id)},
            json={"dates": dates, "hours_per_day": 8, "type": "VACATION"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["shortfall"] == 12
        overview = client.get(
            f"{API}/compensation", params={"user_id": str(overtime_worker.id)}
        ).json()
        assert overview["balance"] == 12
        assert overview["pending_requests"] == []

    def test_bulk(self, client, overtime_worker):
        dates = [(FUTURE + timedelta(days=i)).isoformat() for i in range(2)]

        response = client.post(
            f"{API}/compensation/bulk",
            params={"user_id": str(overtime_worker.id)},
            json={"dates": dates, "hours_per_day": 4, "reason": "Verhuizing"},
        )

        assert response.status_code == 201
        data = response.json()
        assert len(data["requests"]) == 2
        assert data["total_hours"] == 8
        assert data["remaining_balance"] == 4
        assert data["message"] == "2 dagen compensatie aangevraagd (8u 0m)"

    def test_bulk_without_dates(self, client, overtime_worker):
        response = client.post(
            f"{API}/compensation/bulk",
            params={"user_id": str(overtime_worker.id)},
            json={"dates": [], "hours_per_day": 4},
        )
        assert response.status_code == 400

    def test_approve_then_conflict(self, client, overtime_worker):
        """Test that deciding a request twice is a conflict."""
        created = client.post(
            f"{API}/compensation/use",
            params={"user_id": str(overtime_worker.id)},
            json={"date": FUTURE.isoformat(), "hours": 4},
        ).json()

        approved = client.post(f"{API}/compensation/{created['id']}/approve")
        again = client.post(f"{API}/compensation/{created['id']}/approve")
        rejected = client.post(f"{API}/compensation/{created['id']}/reject")

        assert approved.status_code == 200
        assert approved.json()["status"] == "APPROVED"
        assert approved.json()["requires_approval"] is False
        assert again.status_code == 409
        assert rejected.status_code == 409

    def test_reject_restores_balance(self, client, overtime_worker):
        created = client.post(
            f"{API}/compensation/use",
            params={"user_id": str(overtime_worker.id)},
            json={"date": FUTURE.isoformat(), "hours": 4},
        ).json()

        response = client.post(f"{API}/compensation/{created['id']}/reject")

        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"
        assert response.json()["remaining_balance"] == 12

    def test_decide_unknown_request(self, client, db_session):
        response = client.post(f"{API}/compensation/{uuid.uuid4()}/approve")
        assert response.status_code == 404
