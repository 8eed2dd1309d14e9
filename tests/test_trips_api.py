import pytest


@pytest.fixture
def driver(make_user):
    return make_user("drv", role="driver")


def new_trip(client, driver_id, when, duration=30, **extra):
    res = client.post(
        "/api/trips",
        json={
            "person_name": "Sara",
            "location": "School",
            "departure_time": when,
            "estimated_duration": duration,
            "assigned_driver": driver_id,
            **extra,
        },
    )
    assert res.status_code == 200, res.text
    return res.json()


def test_overlapping_trip_reports_conflict(client, driver):
    a = new_trip(client, driver["id"], "2030-01-01T09:00:00Z")
    b = new_trip(client, driver["id"], "2030-01-01T09:15:00Z")
    assert [t["id"] for t in b["conflicts"]] == [a["id"]]

    res = client.get(
        f"/api/drivers/{driver['id']}/availability",
        params={"departureTime": "2030-01-01T09:15:00Z", "duration": 30, "excludeTripId": b["id"]},
    )
    assert res.status_code == 200
    body = res.json()
    assert [t["id"] for t in body["time_conflicts"]] == [a["id"]]
    assert body["busy"] is False


def test_non_overlapping_trip_has_no_conflicts(client, driver):
    new_trip(client, driver["id"], "2030-01-01T09:00:00Z")
    later = new_trip(client, driver["id"], "2030-01-01T09:30:00Z")
    assert later["conflicts"] == []


def test_driver_on_started_trip_is_busy(client, driver, client_for):
    trip = new_trip(client, driver["id"], "2030-01-01T09:00:00Z")
    assert client.patch(f"/api/trips/{trip['id']}/status", json={"status": "approved"}).status_code == 200

    drv = client_for("drv")
    res = drv.patch(f"/api/trips/{trip['id']}/status", json={"status": "started"})
    assert res.status_code == 200
    assert res.json()["started_at"] is not None

    availability = client.get(f"/api/drivers/{driver['id']}/availability").json()
    assert availability["busy"] is True
    assert [t["id"] for t in availability["active_trips"]] == [trip["id"]]

    drivers = client.get("/api/drivers").json()
    assert drivers == [
        {"id": driver["id"], "username": "drv", "display_name": "Drv", "first_name": None, "busy": True}
    ]


def test_waiting_then_completed_clears_waiting_start(client, driver, client_for):
    trip = new_trip(client, driver["id"], "2030-01-01T09:00:00Z")
    client.patch(f"/api/trips/{trip['id']}/status", json={"status": "approved"})
    drv = client_for("drv")
    drv.patch(f"/api/trips/{trip['id']}/status", json={"status": "started"})

    waiting = drv.patch(f"/api/trips/{trip['id']}/status", json={"status": "waiting"}).json()
    assert waiting["waiting_started_at"] is not None

    done = drv.patch(f"/api/trips/{trip['id']}/status", json={"status": "completed"}).json()
    assert done["status"] == "completed"
    assert done["waiting_started_at"] is None
    assert done["waiting_duration"] >= 0
    assert done["completed_at"] is not None


def test_household_cannot_approve_trip(client, driver, make_user, client_for):
    make_user("sara")
    sara = client_for("sara")
    trip = new_trip(sara, driver["id"], "2030-01-01T09:00:00Z")

    res = sara.patch(f"/api/trips/{trip['id']}/status", json={"status": "approved"})
    assert res.status_code == 403
    assert res.json()["message"] == "Missing permission: trips.approve"


def test_cancel_past_trip_is_rejected(client, driver):
    trip = new_trip(client, driver["id"], "2020-01-01T09:00:00Z")
    res = client.delete(f"/api/trips/{trip['id']}")
    assert res.status_code == 403
    assert res.json()["message"] == "Trip has already departed"
    assert client.get(f"/api/trips/{trip['id']}").json()["status"] == "pending"


def test_cancel_future_trip(client, driver):
    trip = new_trip(client, driver["id"], "2030-01-01T09:00:00Z")
    res = client.delete(f"/api/trips/{trip['id']}")
    assert res.status_code == 200
    assert res.json()["status"] == "cancelled"


def test_personal_trip_skips_approval(client, driver):
    trip = new_trip(client, driver["id"], "2030-01-01T09:00:00Z", is_personal=True)
    assert trip["status"] == "approved"


def test_trip_assignment_requires_a_driver(client, make_user):
    sara = make_user("sara")
    res = client.post(
        "/api/trips",
        json={
            "person_name": "Sara",
            "location": "School",
            "departure_time": "2030-01-01T09:00:00Z",
            "assigned_driver": sara["id"],
        },
    )
    assert res.status_code == 400


def test_driver_sees_assigned_and_open_trips(client, driver, make_user, client_for):
    make_user("other", role="driver")
    mine = new_trip(client, driver["id"], "2030-01-01T09:00:00Z")
    new_trip(client, None, "2030-01-01T10:00:00Z")  # pending, unassigned
    theirs = new_trip(client, None, "2030-01-01T11:00:00Z")
    client.patch(f"/api/trips/{theirs['id']}/status", json={"status": "approved"})

    ids = sorted(t["id"] for t in client_for("drv").get("/api/trips").json())
    assert ids == sorted([mine["id"], theirs["id"]])


def test_driver_shopping_an_order_is_busy(client, driver, client_for):
    order = client.post("/api/orders", json={}).json()
    client.patch(f"/api/orders/{order['id']}/status", json={"status": "approved"})
    res = client_for("drv").patch(f"/api/orders/{order['id']}/status", json={"status": "in_progress"})
    assert res.status_code == 200

    availability = client.get(f"/api/drivers/{driver['id']}/availability").json()
    assert availability["busy"] is True
    assert [o["id"] for o in availability["active_orders"]] == [order["id"]]
    assert availability["active_trips"] == []

    assert [d["busy"] for d in client.get("/api/drivers").json()] == [True]
