import pytest


@pytest.fixture
def product(client):
    res = client.post("/api/products", json={"name_ar": "حليب", "name_en": "Milk", "estimated_price": 500})
    assert res.status_code == 200, res.text
    return res.json()


def test_unapproved_user_cannot_approve_order(make_user, client_for):
    make_user("sara")
    sara = client_for("sara")
    order = sara.post("/api/orders", json={"notes": "weekly"}).json()
    assert order["status"] == "pending"

    res = sara.patch(f"/api/orders/{order['id']}/status", json={"status": "approved"})
    assert res.status_code == 403
    assert res.json()["message"] == "Missing permission: orders.approve"
    assert sara.get(f"/api/orders/{order['id']}").json()["status"] == "pending"


def test_approver_approves_and_is_recorded(make_user, client_for):
    make_user("sara")
    mama = make_user("mama", can_approve=True)
    order = client_for("sara").post("/api/orders", json={}).json()

    res = client_for("mama").patch(f"/api/orders/{order['id']}/status", json={"status": "approved"})
    assert res.status_code == 200
    assert res.json()["status"] == "approved"
    assert res.json()["approved_by"] == mama["id"]


def test_full_order_lifecycle(client, make_user, client_for, product):
    driver = make_user("drv", role="driver")
    order = client.post(
        "/api/orders", json={"items": [{"product_id": product["id"], "quantity": 2}]}
    ).json()
    assert order["total_estimated"] == 1000
    assert len(order["items"]) == 1

    assert client.patch(f"/api/orders/{order['id']}/status", json={"status": "approved"}).status_code == 200

    drv = client_for("drv")
    res = drv.patch(f"/api/orders/{order['id']}/status", json={"status": "in_progress"})
    assert res.status_code == 200
    assert res.json()["assigned_driver"] == driver["id"]

    res = drv.patch(f"/api/orders/{order['id']}/actual", json={"total_actual": 950, "receipt_image_url": "/uploads/r.jpg"})
    assert res.status_code == 200
    assert drv.patch(f"/api/orders/{order['id']}/status", json={"status": "completed"}).status_code == 200

    stats = client.get("/api/stats").json()
    assert stats["completed"] == 1
    assert stats["total_spent"] == 950


def test_unknown_transition_is_forbidden(client):
    order = client.post("/api/orders", json={}).json()
    res = client.patch(f"/api/orders/{order['id']}/status", json={"status": "completed"})
    assert res.status_code == 403
    assert res.json()["message"] == "Cannot move order from pending to completed"


def test_item_mutations_recompute_estimate(client, product):
    order = client.post("/api/orders", json={}).json()
    assert order["total_estimated"] == 0

    item = client.post(f"/api/orders/{order['id']}/items", json={"product_id": product["id"], "quantity": 3}).json()
    assert client.get(f"/api/orders/{order['id']}").json()["total_estimated"] == 1500

    client.patch(f"/api/order-items/{item['id']}", json={"quantity": 1, "estimated_price": 700})
    assert client.get(f"/api/orders/{order['id']}").json()["total_estimated"] == 700

    assert client.delete(f"/api/order-items/{item['id']}").status_code == 200
    assert client.get(f"/api/orders/{order['id']}").json()["total_estimated"] == 0


def test_household_sees_only_own_orders(client, make_user, client_for):
    make_user("sara")
    make_user("ali")
    client_for("sara").post("/api/orders", json={})
    ali = client_for("ali")
    ali.post("/api/orders", json={})

    assert len(ali.get("/api/orders").json()) == 1
    assert len(client.get("/api/orders").json()) == 2


def test_driver_sees_only_approved_work(client, make_user, client_for):
    make_user("drv", role="driver")
    pending = client.post("/api/orders", json={}).json()
    approved = client.post("/api/orders", json={}).json()
    client.patch(f"/api/orders/{approved['id']}/status", json={"status": "approved"})

    drv = client_for("drv")
    ids = [o["id"] for o in drv.get("/api/orders").json()]
    assert ids == [approved["id"]]
    assert drv.get(f"/api/orders/{pending['id']}").status_code == 404


def test_missing_order_is_404(client):
    res = client.get("/api/orders/999")
    assert res.status_code == 404
    assert res.json() == {"message": "Order not found"}


def test_new_order_notifies_approvers(make_user, client_for):
    make_user("sara")
    make_user("mama", can_approve=True)
    client_for("sara").post("/api/orders", json={})

    mama = client_for("mama")
    notes = mama.get("/api/notifications").json()
    assert [n["type"] for n in notes] == ["order_new"]
    counts = mama.get("/api/notifications/unread-count").json()
    assert counts["count"] == 1
    assert counts["groceries"] == 1


def test_second_driver_cannot_take_over_order(client, make_user, client_for):
    make_user("drv", role="driver")
    make_user("drv2", role="driver")
    order = client.post("/api/orders", json={}).json()
    client.patch(f"/api/orders/{order['id']}/status", json={"status": "approved"})
    client_for("drv").patch(f"/api/orders/{order['id']}/status", json={"status": "in_progress"})

    other = client_for("drv2")
    res = other.patch(f"/api/orders/{order['id']}/status", json={"status": "completed"})
    assert res.status_code == 403
    assert res.json()["message"] == "Order is assigned to another driver"
    assert other.patch(f"/api/orders/{order['id']}/actual", json={"total_actual": 10}).status_code == 403
    assert client.get(f"/api/orders/{order['id']}").json()["status"] == "in_progress"


def test_finished_order_cannot_be_rescheduled(client):
    order = client.post("/api/orders", json={}).json()
    client.patch(f"/api/orders/{order['id']}/status", json={"status": "rejected"})
    res = client.patch(f"/api/orders/{order['id']}/scheduled", json={"scheduled_for": "2030-02-01"})
    assert res.status_code == 403
    assert res.json()["message"] == "Cannot reschedule a rejected order"
