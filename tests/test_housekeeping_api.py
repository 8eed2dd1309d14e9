import pytest


@pytest.fixture
def room(client):
    res = client.post("/api/rooms", json={"name_ar": "المطبخ", "name_en": "Kitchen"})
    assert res.status_code == 200, res.text
    return res.json()


def test_tasks_filtered_by_date(client, room):
    weekly = client.post(
        "/api/housekeeping-tasks",
        json={"title_ar": "مسح", "frequency": "weekly", "days_of_week": [1], "room_id": room["id"]},
    ).json()
    daily = client.post(
        "/api/housekeeping-tasks", json={"title_ar": "ترتيب", "room_id": room["id"]}
    ).json()

    monday = [t["id"] for t in client.get("/api/housekeeping-tasks", params={"date": "2030-01-07"}).json()]
    tuesday = [t["id"] for t in client.get("/api/housekeeping-tasks", params={"date": "2030-01-08"}).json()]
    assert sorted(monday) == sorted([weekly["id"], daily["id"]])
    assert tuesday == [daily["id"]]


def test_excluded_room_hides_tasks(client, room):
    client.post("/api/housekeeping-tasks", json={"title_ar": "ترتيب", "room_id": room["id"]})
    client.patch(f"/api/rooms/{room['id']}", json={"is_excluded": True})
    assert client.get("/api/housekeeping-tasks", params={"date": "2030-01-07"}).json() == []


def test_weekly_task_requires_days(client, room):
    res = client.post(
        "/api/housekeeping-tasks", json={"title_ar": "مسح", "frequency": "weekly", "room_id": room["id"]}
    )
    assert res.status_code == 400


def test_weekly_completion_is_keyed_by_saturday(client, room, make_user, client_for):
    task = client.post(
        "/api/housekeeping-tasks",
        json={"title_ar": "مسح", "frequency": "weekly", "days_of_week": [1], "room_id": room["id"]},
    ).json()
    make_user("maria", role="maid")
    maid = client_for("maria")

    done = maid.post("/api/task-completions", json={"task_id": task["id"], "date": "2030-01-07"}).json()
    assert done["completion_date"] == "W-2030-01-05"

    # The whole week sees the completion; ticking it twice is a no-op
    again = maid.post("/api/task-completions", json={"task_id": task["id"], "date": "2030-01-10"}).json()
    assert again["id"] == done["id"]
    listed = maid.get("/api/task-completions", params={"date": "2030-01-09"}).json()
    assert [c["id"] for c in listed] == [done["id"]]

    assert maid.delete(f"/api/task-completions/{task['id']}/W-2030-01-05").status_code == 200
    assert maid.get("/api/task-completions", params={"date": "2030-01-09"}).json() == []


def test_driver_cannot_complete_housekeeping(client, room, make_user, client_for):
    task = client.post("/api/housekeeping-tasks", json={"title_ar": "ترتيب", "room_id": room["id"]}).json()
    make_user("drv", role="driver")
    res = client_for("drv").post("/api/task-completions", json={"task_id": task["id"], "date": "2030-01-07"})
    assert res.status_code == 403
    assert res.json()["message"] == "Missing permission: housekeeping.complete"


def test_user_rooms_replace_the_set(client, room, make_user):
    maria = make_user("maria", role="maid")
    other = client.post("/api/rooms", json={"name_ar": "الصالة"}).json()

    assert client.put(f"/api/user-rooms/{maria['id']}", json={"room_ids": [room["id"], other["id"]]}).status_code == 200
    assert client.put(f"/api/user-rooms/{maria['id']}", json={"room_ids": [other["id"]]}).json() == [other["id"]]
    assert client.get(f"/api/user-rooms/{maria['id']}").json() == [other["id"]]


def test_laundry_request_notifies_maids(client, room, make_user, client_for):
    make_user("maria", role="maid")
    req = client.post("/api/laundry-requests", json={"room_id": room["id"]}).json()
    assert req["status"] == "pending"

    maid = client_for("maria")
    assert maid.get("/api/notifications/unread-count").json()["housekeeping"] == 1
    done = maid.patch(f"/api/laundry-requests/{req['id']}/complete").json()
    assert done["status"] == "completed"
    assert done["completed_at"] is not None


def test_laundry_schedule_is_replaced(client):
    client.put("/api/laundry-schedule", json={"days": [0, 3]})
    days = [row["day_of_week"] for row in client.put("/api/laundry-schedule", json={"days": [5, 1, 1]}).json()]
    assert days == [1, 5]
    assert [row["day_of_week"] for row in client.get("/api/laundry-schedule").json()] == [1, 5]


def test_maid_call_lifecycle(client, make_user, client_for):
    make_user("maria", role="maid")
    call = client.post("/api/maid-calls").json()
    assert call["status"] == "active"

    maid = client_for("maria")
    assert [c["id"] for c in maid.get("/api/maid-calls").json()] == [call["id"]]
    assert maid.patch(f"/api/maid-calls/{call['id']}/dismiss").json()["status"] == "dismissed"
    assert maid.get("/api/maid-calls").json() == []


def test_meals_for_a_date(client):
    client.post("/api/meals", json={"day_of_week": 1, "meal_type": "lunch", "title_ar": "كبسة"})
    client.post("/api/meals", json={"day_of_week": 2, "meal_type": "lunch", "title_ar": "مرق"})
    dated = client.post(
        "/api/meals", json={"day_of_week": 1, "date_str": "2030-01-07", "meal_type": "dinner", "title_ar": "سمك"}
    ).json()

    monday = {m["title_ar"] for m in client.get("/api/meals", params={"date": "2030-01-07"}).json()}
    assert monday == {"كبسة", "سمك"}
    next_monday = {m["title_ar"] for m in client.get("/api/meals", params={"date": "2030-01-14"}).json()}
    assert next_monday == {"كبسة"}
    assert dated["date_str"] == "2030-01-07"


def test_shortages_need_capabilities(client, make_user, client_for):
    make_user("maria", role="maid", can_add_shortages=True)
    make_user("sara")
    assert client_for("sara").post("/api/shortages", json={"name_ar": "سكر"}).status_code == 403

    maid = client_for("maria")
    shortage = maid.post("/api/shortages", json={"name_ar": "سكر", "quantity": 2}).json()
    assert maid.patch(f"/api/shortages/{shortage['id']}/status", json={"status": "approved"}).status_code == 403

    res = client.patch(f"/api/shortages/{shortage['id']}/status", json={"status": "approved"})
    assert res.status_code == 200
    assert res.json()["status"] == "approved"
    assert maid.get("/api/notifications/unread-count").json()["groceries"] == 1
