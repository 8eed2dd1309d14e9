import os
from datetime import datetime

from baytkom.core.constants import UPLOAD_DIR
from baytkom.models.order import Order


def test_upload_image_returns_public_url(client):
    res = client.post("/api/upload", files={"file": ("receipt.png", b"\x89PNG\r\n\x1a\nfake", "image/png")})
    assert res.status_code == 200
    url = res.json()["url"]
    assert url.startswith("/uploads/") and url.endswith(".png")
    assert os.path.exists(os.path.join(UPLOAD_DIR, url.rsplit("/", 1)[1]))
    assert client.get(url).status_code == 200


def test_upload_rejects_non_images(client):
    res = client.post("/api/upload", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid file type."


def test_monthly_report_counts_completed_work(client, make_user, client_for):
    driver = make_user("drv", role="driver")
    order = client.post("/api/orders", json={}).json()
    client.patch(f"/api/orders/{order['id']}/status", json={"status": "approved"})
    drv = client_for("drv")
    drv.patch(f"/api/orders/{order['id']}/status", json={"status": "in_progress"})
    drv.patch(f"/api/orders/{order['id']}/actual", json={"total_actual": 1200})
    drv.patch(f"/api/orders/{order['id']}/status", json={"status": "completed"})

    trip = client.post(
        "/api/trips",
        json={"person_name": "Sara", "location": "Mall", "departure_time": "2030-01-01T09:00:00Z",
              "assigned_driver": driver["id"]},
    ).json()
    client.patch(f"/api/trips/{trip['id']}/status", json={"status": "approved"})
    drv.patch(f"/api/trips/{trip['id']}/status", json={"status": "started"})
    drv.patch(f"/api/trips/{trip['id']}/status", json={"status": "completed"})

    report = client.get("/api/reports").json()
    assert report["total_spent"] == 1200
    assert report["orders_completed"] == 1
    assert report["trips_completed"] == 1
    assert report["waiting_minutes"] == 0


def test_reports_are_admin_only(make_user, client_for):
    make_user("mama", can_approve=True)
    assert client_for("mama").get("/api/reports").status_code == 403


def test_report_month_follows_completion_time(client, make_user, client_for, with_db):
    make_user("drv", role="driver")
    order = client.post("/api/orders", json={}).json()
    client.patch(f"/api/orders/{order['id']}/status", json={"status": "approved"})
    drv = client_for("drv")
    drv.patch(f"/api/orders/{order['id']}/status", json={"status": "in_progress"})
    drv.patch(f"/api/orders/{order['id']}/status", json={"status": "completed"})
    assert client.get(f"/api/orders/{order['id']}").json()["completed_at"] is not None

    async def _backdate(db):
        row = await db.get(Order, order["id"])
        row.completed_at = datetime(2029, 12, 15, 9, 0)
        await db.commit()

    with_db(_backdate)
    # A later totals edit bumps updated_at but not the completion month
    drv.patch(f"/api/orders/{order['id']}/actual", json={"total_actual": 700})

    assert client.get("/api/reports", params={"month": "2029-12"}).json()["orders_completed"] == 1
    assert client.get("/api/reports").json()["orders_completed"] == 0
