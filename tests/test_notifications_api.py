from datetime import datetime, timedelta
from unittest import mock

from baytkom.crud.notification import section_for
from baytkom.services import notifier, push
from baytkom.utils.time_windows import parse_since


def test_sections_follow_type_prefix():
    assert section_for("order_new") == "groceries"
    assert section_for("shortage_new") == "groceries"
    assert section_for("trip_approved") == "logistics"
    assert section_for("spare_part_new") == "logistics"
    assert section_for("laundry_new") == "housekeeping"
    assert section_for("maid_call") == "housekeeping"
    assert section_for("general") == "home"


def test_push_payload_shape():
    payload = push.build_payload("Title", "Body", "/groceries", "order_new", badge_count=3)
    assert payload == {
        "title": "Title",
        "body": "Body",
        "icon": push.DEFAULT_ICON,
        "data": {"url": "/groceries"},
        "tag": "order_new",
        "badgeCount": 3,
    }


def test_mark_read_and_mark_all(make_user, client_for):
    make_user("sara")
    make_user("mama", can_approve=True)
    sara = client_for("sara")
    sara.post("/api/orders", json={})
    sara.post("/api/orders", json={})

    mama = client_for("mama")
    notes = mama.get("/api/notifications").json()
    assert len(notes) == 2

    assert mama.patch(f"/api/notifications/{notes[0]['id']}/read").json()["is_read"] is True
    assert mama.get("/api/notifications/unread-count").json()["count"] == 1

    assert mama.post("/api/notifications/mark-all-read").json()["updated"] == 1
    assert mama.get("/api/notifications/unread-count").json() == {
        "count": 0, "home": 0, "groceries": 0, "logistics": 0, "housekeeping": 0,
    }


def test_cannot_read_someone_elses_notification(client, make_user, client_for):
    make_user("sara")
    make_user("mama", can_approve=True)
    client_for("sara").post("/api/orders", json={})
    note = client_for("mama").get("/api/notifications").json()[0]

    res = client_for("sara").patch(f"/api/notifications/{note['id']}/read")
    assert res.status_code == 404


def test_push_subscription_roundtrip(client):
    sub = {"endpoint": "https://push.example/abc", "keys": {"p256dh": "key", "auth": "secret"}}
    assert client.post("/api/push-subscribe", json=sub).json() == {"success": True}
    # Re-subscribing the same endpoint updates in place
    assert client.post("/api/push-subscribe", json=sub).json() == {"success": True}
    assert client.post("/api/push-unsubscribe", json={"endpoint": sub["endpoint"]}).json() == {"success": True}
    assert client.post("/api/push-unsubscribe", json={"endpoint": sub["endpoint"]}).json() == {"success": False}


def test_vapid_key_endpoint(client):
    assert client.get("/api/vapid-public-key").json() == {"publicKey": ""}


def test_gone_subscription_is_removed(client, with_db):
    me = client.get("/api/auth/user").json()
    client.post(
        "/api/push-subscribe",
        json={"endpoint": "https://push.example/gone", "keys": {"p256dh": "k", "auth": "a"}},
    )

    async def _notify(db):
        return await notifier.notify(db, [me["id"]], title_ar="اختبار", type="general")

    with mock.patch.object(push, "push_enabled", return_value=True), \
            mock.patch.object(push, "send_push", return_value=push.PUSH_GONE) as send:
        rows = with_db(_notify)

    assert len(rows) == 1
    assert send.call_count == 1
    assert client.post("/api/push-unsubscribe", json={"endpoint": "https://push.example/gone"}).json() == {"success": False}


def test_push_failure_never_breaks_notify(client, with_db):
    me = client.get("/api/auth/user").json()
    client.post(
        "/api/push-subscribe",
        json={"endpoint": "https://push.example/flaky", "keys": {"p256dh": "k", "auth": "a"}},
    )

    async def _notify(db):
        return await notifier.notify(db, [me["id"], me["id"]], title_ar="اختبار", type="trip_new")

    with mock.patch.object(push, "push_enabled", return_value=True), \
            mock.patch.object(push, "send_push", side_effect=RuntimeError("boom")):
        rows = with_db(_notify)

    assert len(rows) == 1  # recipients are de-duplicated
    assert client.get("/api/notifications/unread-count").json()["logistics"] == 1


def test_since_windows():
    now = datetime(2030, 1, 10, 12, 0)
    assert parse_since("24h", now=now) == now - timedelta(hours=24)
    assert parse_since("2w", now=now) == now - timedelta(weeks=2)
    assert parse_since("all") is None
    # Local midnight in Asia/Kuwait is 21:00 UTC the day before
    assert parse_since("2030-01-10") == datetime(2030, 1, 9, 21, 0)


def test_since_rejects_impossible_date(client):
    res = client.get("/api/notifications", params={"since": "2024-02-30"})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid since value"


def test_since_rejects_unknown_format(client):
    res = client.get("/api/notifications", params={"since": "xyz"})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid since value"
