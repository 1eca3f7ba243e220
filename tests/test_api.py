import json

import pytest


BRICK = {"type": "Red Clay", "description": "Standard fired clay", "currentStock": 5000, "minStock": 1000, "unitPrice": "12.00"}


def _order_payload(brick_id, **overrides):
    data = {
        "customerName": "Ahmed Traders",
        "customerAddress": "12 Mall Road",
        "deliveryAddress": "Plot 7, Site Area",
        "brickType": brick_id,
        "quantity": 100,
        "unitPrice": "12.00",
        "totalAmount": "1200.00",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def brick(client):
    r = client.post("/api/bricks", json=BRICK)
    assert r.status_code == 201
    return r.json()


def test_brick_crud(client, brick):
    assert brick["currentStock"] == 5000
    assert brick["lastUpdated"]

    r = client.get("/api/bricks")
    assert r.status_code == 200 and [b["id"] for b in r.json()] == [brick["id"]]

    r = client.put(f"/api/bricks/{brick['id']}", json={"unitPrice": "13.00"})
    assert r.status_code == 200
    assert r.json()["unitPrice"] == "13.00" and r.json()["type"] == "Red Clay"

    r = client.delete(f"/api/bricks/{brick['id']}")
    assert r.status_code == 204
    assert client.get(f"/api/bricks/{brick['id']}").status_code == 404


def test_brick_stock_endpoint(client, brick):
    r = client.put(f"/api/bricks/{brick['id']}/stock", json={"currentStock": 4200})
    assert r.status_code == 200 and r.json()["currentStock"] == 4200


@pytest.mark.parametrize("resource", ["bricks", "tractors", "laborers", "orders", "invoices"])
def test_missing_records_return_404(client, resource):
    r = client.put(f"/api/{resource}/missing", json={})
    assert r.status_code == 404
    assert r.json()["message"].endswith("not found")
    assert client.delete(f"/api/{resource}/missing").status_code == 404


def test_validation_errors_are_400_with_message(client):
    r = client.post("/api/bricks", json={"type": "Red Clay"})
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Invalid brick data"
    assert body["details"]

    r = client.post("/api/bricks", json=dict(BRICK, unitPrice="twelve"))
    assert r.status_code == 400

    r = client.post("/api/laborers", json={"name": "Rashid", "phone": "1", "monthlySalary": "-5"})
    assert r.status_code == 400 and r.json()["message"] == "Invalid laborer data"


def test_patch_rejects_null_for_required_field(client, brick):
    r = client.put(f"/api/bricks/{brick['id']}", json={"type": None})
    assert r.status_code == 400


def test_tractor_routes(client):
    a = client.post("/api/tractors", json={"registrationNumber": "LHR-1", "model": "MF 385"}).json()
    client.post("/api/tractors", json={"registrationNumber": "LHR-2", "model": "MF 385", "status": "maintenance"})
    assert a["status"] == "available"

    r = client.get("/api/tractors/available")
    assert [t["id"] for t in r.json()] == [a["id"]]

    r = client.post("/api/tractors", json={"registrationNumber": "LHR-1", "model": "Fiat"})
    assert r.status_code == 400
    assert "already exists" in r.json()["message"]


def test_laborer_routes(client):
    active = client.post("/api/laborers", json={"name": "Rashid", "phone": "1", "monthlySalary": "32000", "address": ""}).json()
    assert active["address"] is None
    client.post("/api/laborers", json={"name": "Bilal", "phone": "2", "monthlySalary": 30000, "status": "inactive"})
    r = client.get("/api/laborers/active")
    assert [laborer["id"] for laborer in r.json()] == [active["id"]]


def test_order_flow_updates_stock_and_statistics(client, brick):
    tractor = client.post("/api/tractors", json={"registrationNumber": "LHR-1", "model": "MF 385"}).json()

    r = client.post("/api/orders", json=_order_payload(brick["id"], assignedTractorId=tractor["id"]))
    assert r.status_code == 201
    order = r.json()
    assert order["orderNumber"] == "ORD001"
    assert order["totalAmount"] == "1200.00"
    assert order["status"] == "pending"

    second = client.post("/api/orders", json=_order_payload(brick["id"])).json()
    assert second["orderNumber"] == "ORD002"

    assert client.get(f"/api/bricks/{brick['id']}").json()["currentStock"] == 4800
    assert client.get(f"/api/tractors/{tractor['id']}").json()["status"] == "assigned"
    assert [o["id"] for o in client.get("/api/orders").json()] == [second["id"], order["id"]]
    assert len(client.get("/api/orders/status/pending").json()) == 2
    assert client.get("/api/orders/status/delivered").json() == []

    stats = client.get("/api/statistics").json()
    assert stats["totalBricks"] == 4800
    assert stats["pendingOrders"] == 2
    assert stats["availableTractors"] == 0
    assert stats["lowStockBricks"] == []


def test_order_exceeding_stock_is_rejected(client, brick):
    r = client.post("/api/orders", json=_order_payload(brick["id"], quantity=9000))
    assert r.status_code == 400
    assert "Insufficient stock" in r.json()["message"]
    assert client.get("/api/orders").json() == []


def test_settings_roundtrip(client):
    assert client.get("/api/settings").json() == []
    r = client.put("/api/settings", json=[{"key": "taxRate", "value": "0.16"}, {"key": "deliveryCharge", "value": "3000"}])
    assert r.status_code == 200
    r = client.put("/api/settings", json=[{"key": "taxRate", "value": "0.17"}])
    assert {s["key"]: s["value"] for s in r.json()} == {"taxRate": "0.17", "deliveryCharge": "3000"}

    r = client.put("/api/settings", json=[{"key": "taxRate"}])
    assert r.status_code == 400 and r.json()["message"] == "Invalid settings data"


def test_generate_invoice_from_order(client, brick):
    order = client.post("/api/orders", json=_order_payload(brick["id"])).json()

    preview = client.get(f"/api/orders/{order['id']}/invoice/preview").json()
    assert preview["invoiceNumber"] == "INV-ORD001"
    assert preview["totalAmount"] == "5546.00"
    assert client.get("/api/invoices").json() == []

    r = client.post(f"/api/orders/{order['id']}/invoice")
    assert r.status_code == 201
    invoice = r.json()
    assert invoice["invoiceNumber"] == "INV001"
    assert invoice["subtotal"] == "4700.00"
    assert invoice["taxAmount"] == "846.00"
    assert invoice["paymentStatus"] == "pending"
    assert invoice["dueDate"]
    assert len(json.loads(invoice["items"])) == 3

    r = client.get(f"/api/invoices/order/{order['id']}")
    assert r.status_code == 200 and r.json()["id"] == invoice["id"]

    r = client.post(f"/api/orders/{order['id']}/invoice")
    assert r.status_code == 400

    r = client.put(f"/api/invoices/{invoice['id']}", json={"paymentStatus": "paid"})
    assert r.status_code == 200
    assert client.get("/api/statistics").json()["totalSales"] == pytest.approx(5546.0)


def test_invoice_for_order_with_deleted_brick(client, brick):
    order = client.post("/api/orders", json=_order_payload(brick["id"])).json()
    client.delete(f"/api/bricks/{brick['id']}")
    r = client.post(f"/api/orders/{order['id']}/invoice")
    assert r.status_code == 400
    assert client.post("/api/orders/missing/invoice").status_code == 404


def test_invoice_date_fields_are_coerced(client):
    payload = {
        "orderId": "order-1",
        "customerName": "Ahmed Traders",
        "customerAddress": "12 Mall Road",
        "deliveryAddress": "Plot 7",
        "items": [{"description": "Delivery Charges", "quantity": 1, "rate": "2500.00", "amount": "2500.00"}],
        "subtotal": "2500.00",
        "taxAmount": "450.00",
        "totalAmount": "2950.00",
        "dueDate": "2024-04-01T00:00:00.000Z",
    }
    r = client.post("/api/invoices", json=payload)
    assert r.status_code == 201
    invoice = r.json()
    assert invoice["dueDate"].startswith("2024-04-01")
    assert json.loads(invoice["items"])[0]["amount"] == "2500.00"

    r = client.put(f"/api/invoices/{invoice['id']}", json={"dueDate": "not a date"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid invoice data"

    r = client.post("/api/invoices", json=dict(payload, orderId="order-2", items="not json"))
    assert r.status_code == 400


def test_health_and_request_id(client):
    r = client.get("/health", headers={"X-Request-ID": "abc"})
    assert r.json() == {"ok": True}
    assert r.headers["X-Request-ID"] == "abc"


@pytest.mark.parametrize("overrides", [{"unitPrice": "1E+26"}, {"totalAmount": "12.123456"}, {"quantity": 10**12}])
def test_order_amounts_out_of_range_are_rejected(client, brick, overrides):
    r = client.post("/api/orders", json=_order_payload(brick["id"], **overrides))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid order data"


def test_invoice_too_large_to_store_is_a_bad_request(client, brick):
    order = client.post("/api/orders", json=_order_payload(brick["id"], quantity=1000, unitPrice="999999999999999")).json()
    assert order["orderNumber"] == "ORD001"

    r = client.get(f"/api/orders/{order['id']}/invoice/preview")
    assert r.status_code == 400
    assert "out of range" in r.json()["message"]

    r = client.post(f"/api/orders/{order['id']}/invoice")
    assert r.status_code == 400
    assert client.get("/api/invoices").json() == []
