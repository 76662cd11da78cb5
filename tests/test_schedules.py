"""
Tests for schedule, reminder and calendar endpoints.
"""
from datetime import datetime

from conftest import from_now, iso


def parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def create(client, headers, hours=2, post_id="post-1", timezone="UTC"):
    return client.post(
        "/api/schedules",
        headers=headers,
        json={"postId": post_id, "scheduledAt": iso(from_now(hours=hours)), "timezone": timezone},
    )


class TestScheduleEndpoints:
    """Test /api/schedules."""

    def test_requires_auth(self, client):
        response = client.get("/api/schedules/post/post-1")
        assert response.status_code == 401
        assert response.json()["ok"] is False

    def test_create_schedule(self, client, auth_headers):
        response = create(client, auth_headers, timezone="Europe/Paris")

        assert response.status_code == 201
        data = response.json()
        assert data["postId"] == "post-1"
        assert data["timezone"] == "Europe/Paris"
        assert data["status"] == "SCHEDULED"
        assert data["id"]

        reminders = client.get("/api/reminders", headers=auth_headers, params={"scheduleId": data["id"]}).json()
        assert len(reminders) == 1
        assert reminders[0]["offset"] == "1_HOUR"
        assert reminders[0]["type"] == "EMAIL"
        assert (parse(data["scheduledAt"]) - parse(reminders[0]["triggerAt"])).total_seconds() == 3600

    def test_create_in_past_is_400(self, client, auth_headers):
        response = create(client, auth_headers, hours=-1)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Scheduled time must be in the future"
        assert body["error_code"] == "INVALID_TIME"

    def test_create_missing_fields_is_400(self, client, auth_headers):
        response = client.post("/api/schedules", headers=auth_headers, json={"postId": "post-1"})

        assert response.status_code == 400
        assert "Missing required fields" in response.json()["error"]

    def test_update_schedule(self, client, auth_headers):
        schedule_id = create(client, auth_headers).json()["id"]
        new_time = from_now(days=3)

        response = client.patch(
            f"/api/schedules/{schedule_id}",
            headers=auth_headers,
            json={"scheduledAt": iso(new_time)},
        )

        assert response.status_code == 200
        assert abs((parse(response.json()["scheduledAt"]) - new_time).total_seconds()) < 1

    def test_update_unknown_is_400(self, client, auth_headers):
        response = client.patch(
            "/api/schedules/unknown",
            headers=auth_headers,
            json={"scheduledAt": iso(from_now(days=1))},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_cancel_twice(self, client, auth_headers):
        schedule_id = create(client, auth_headers).json()["id"]

        first = client.delete(f"/api/schedules/{schedule_id}", headers=auth_headers)
        second = client.delete(f"/api/schedules/{schedule_id}", headers=auth_headers)

        assert first.status_code == 200
        assert first.json()["status"] == "CANCELLED"
        assert second.status_code == 400
        assert second.json()["error_code"] == "ALREADY_CANCELLED"

    def test_update_cancelled_is_400(self, client, auth_headers):
        schedule_id = create(client, auth_headers).json()["id"]
        client.delete(f"/api/schedules/{schedule_id}", headers=auth_headers)

        response = client.patch(
            f"/api/schedules/{schedule_id}",
            headers=auth_headers,
            json={"scheduledAt": iso(from_now(days=1))},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_STATE"

    def test_date_range(self, client, auth_headers):
        kept = create(client, auth_headers, hours=2).json()
        cancelled = create(client, auth_headers, hours=2.5).json()
        create(client, auth_headers, hours=10)
        client.delete(f"/api/schedules/{cancelled['id']}", headers=auth_headers)

        response = client.get(
            "/api/schedules",
            headers=auth_headers,
            params={"start": iso(from_now()), "end": iso(from_now(hours=3))},
        )

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [kept["id"]]

    def test_date_range_requires_bounds(self, client, auth_headers):
        response = client.get("/api/schedules", headers=auth_headers, params={"start": iso(from_now())})
        assert response.status_code == 400

    def test_by_post(self, client, auth_headers):
        mine = create(client, auth_headers, post_id="42").json()
        create(client, auth_headers, post_id="43")

        response = client.get("/api/schedules/post/42", headers=auth_headers)

        assert [s["id"] for s in response.json()] == [mine["id"]]

    def test_get_single(self, client, auth_headers):
        created = create(client, auth_headers).json()
        response = client.get(f"/api/schedules/{created['id']}", headers=auth_headers)
        assert response.json() == created


class TestReminderEndpoints:
    """Test /api/reminders."""

    def test_add_extra_reminder(self, client, auth_headers):
        schedule_id = create(client, auth_headers, hours=48).json()["id"]

        response = client.post(
            "/api/reminders",
            headers=auth_headers,
            json={"scheduleId": schedule_id, "offset": "1_DAY", "type": "IN_APP"},
        )

        assert response.status_code == 201
        assert response.json()["offset"] == "1_DAY"
        assert len(client.get("/api/reminders", headers=auth_headers).json()) == 2

    def test_filter_by_schedule_id(self, client, auth_headers):
        first = create(client, auth_headers, post_id="a").json()
        create(client, auth_headers, post_id="b")

        response = client.get("/api/reminders", headers=auth_headers, params={"scheduleId": first["id"]})

        assert response.status_code == 200
        assert [r["scheduleId"] for r in response.json()] == [first["id"]]

    def test_bad_offset_is_400(self, client, auth_headers):
        schedule_id = create(client, auth_headers, hours=48).json()["id"]
        response = client.post(
            "/api/reminders",
            headers=auth_headers,
            json={"scheduleId": schedule_id, "offset": "2_WEEKS", "type": "EMAIL"},
        )
        assert response.status_code == 400

    def test_sweep_with_nothing_due(self, client, auth_headers):
        create(client, auth_headers, hours=5)

        response = client.post("/api/reminders/sweep", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"sent": 0, "failed": 0, "skipped": 0}


class TestCalendarEndpoints:
    """Test /api/calendar."""

    def test_upcoming(self, client, auth_headers):
        soonest = create(client, auth_headers, hours=2).json()
        create(client, auth_headers, hours=4)

        response = client.get("/api/calendar/upcoming", headers=auth_headers, params={"limit": 1})

        assert [s["id"] for s in response.json()] == [soonest["id"]]

    def test_range_includes_cancelled(self, client, auth_headers):
        schedule = create(client, auth_headers, hours=2).json()
        client.delete(f"/api/schedules/{schedule['id']}", headers=auth_headers)

        response = client.get(
            "/api/calendar",
            headers=auth_headers,
            params={"start": iso(from_now()), "end": iso(from_now(hours=3))},
        )

        assert [s["status"] for s in response.json()] == ["CANCELLED"]

    def test_by_date(self, client, auth_headers):
        schedule = create(client, auth_headers, hours=2).json()
        day = parse(schedule["scheduledAt"]).date().isoformat()

        response = client.get(f"/api/calendar/date/{day}", headers=auth_headers)

        assert schedule["id"] in [s["id"] for s in response.json()]

    def test_bad_date_is_400(self, client, auth_headers):
        response = client.get("/api/calendar/date/not-a-date", headers=auth_headers)
        assert response.status_code == 400


def test_example_scenario(client, auth_headers):
    schedule = create(client, auth_headers, hours=2).json()
    assert schedule["status"] == "SCHEDULED"

    upcoming = client.get("/api/calendar/upcoming", headers=auth_headers, params={"limit": 1}).json()
    assert [s["id"] for s in upcoming] == [schedule["id"]]

    client.delete(f"/api/schedules/{schedule['id']}", headers=auth_headers)
    in_range = client.get(
        "/api/schedules",
        headers=auth_headers,
        params={"start": iso(from_now()), "end": iso(from_now(hours=3))},
    ).json()
    assert in_range == []


def test_health_reports_store_sizes(client, auth_headers):
    create(client, auth_headers)
    data = client.get("/api/health").json()
    assert data["status"] == "healthy"
    assert data["schedules"] == 1
    assert data["reminders"] == 1
    assert data["reminder_sweeper_running"] is False
