"""
API tests using FastAPI's TestClient against a fresh session per test.
"""
import pytest
from fastapi.testclient import TestClient

from xerox_billing.api.main import app
from xerox_billing.api.state import reset_session
from xerox_billing.services.billing_service import BillingSession


@pytest.fixture
def client(settings):
    reset_session(BillingSession.start(settings))
    return TestClient(app)


@pytest.fixture
def customer_id(client):
    return client.get("/customers").json()[0]["customer_id"]


def test_root(client):
    body = client.get("/").json()
    assert body["status"] == "online"
    assert body["message"] == "SR XEROX Billing API Active"


def test_presets_crud(client):
    assert [p["name"] for p in client.get("/presets").json()] == ["A4 B/W", "A3 Color"]

    resp = client.post("/presets", json={"name": "A4 Duplex", "pages_per_sheet": 2, "price_per_sheet": 1.5})
    assert resp.status_code == 200

    assert client.post("/presets", json={"name": "A4 Duplex"}).status_code == 400
    assert client.post("/presets", json={"name": "Bad", "pages_per_sheet": 0}).status_code == 400

    resp = client.put("/presets/A4 B/W", json={"price_per_sheet": 2.0})
    assert resp.status_code == 200
    assert resp.json()["price_per_sheet"] == 2.0

    resp = client.put("/presets/A4 B/W", json={"name": "A4 Mono"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "A4 Mono"
    assert client.put("/presets/A4 Mono", json={"name": "A3 Color"}).status_code == 400
    assert [p["name"] for p in client.get("/presets").json()] == ["A4 Mono", "A3 Color", "A4 Duplex"]

    assert client.delete("/presets/A4 Duplex").status_code == 200
    assert client.delete("/presets/A4 Duplex").status_code == 404


def test_customer_lifecycle(client, customer_id):
    resp = client.post("/customers", json={})
    assert resp.json()["name"] == "Customer 2"
    second = resp.json()["customer_id"]

    resp = client.put(f"/customers/{customer_id}", json={"discount": 5, "tax": 10, "round_total": True})
    assert resp.json()["discount"] == 5.0

    assert client.delete(f"/customers/{second}").status_code == 200
    assert client.get(f"/customers/{second}").status_code == 404


def test_bill_and_history(client, customer_id):
    client.put(f"/customers/{customer_id}", json={"discount": 5, "tax": 10, "round_total": True})
    client.post(f"/customers/{customer_id}/items", json={"name": "Notes", "type": "A4 B/W", "pages": 5, "sets": 2})
    client.post(f"/customers/{customer_id}/items", json={"name": "Poster", "type": "A3 Color", "pages": 7})

    bill = client.get(f"/customers/{customer_id}/bill").json()
    assert bill["total"] == pytest.approx(82.5)
    assert bill["formatted_total"] == "83"
    assert bill["text"].endswith("Total: ₹83")
    assert len(bill["lines"]) == 2

    assert client.post(f"/customers/{customer_id}/bill/record").status_code == 200
    history = client.get("/history").json()
    assert len(history) == 1
    assert history[0]["formatted_total"] == "83"


def test_item_routes(client, customer_id):
    item = client.post(f"/customers/{customer_id}/items", json={"name": "Notes", "type": "A4 B/W", "pages": 5}).json()
    assert item["sets"] == 1

    resp = client.put(f"/customers/{customer_id}/items/{item['item_id']}", json={"pages": 8})
    assert resp.json()["pages"] == 8

    assert client.put(f"/customers/{customer_id}/items/nope", json={"pages": 1}).status_code == 404
    assert client.delete(f"/customers/{customer_id}/items").json()["removed"] == 1
    assert client.get(f"/customers/{customer_id}").json()["items"] == []


def test_export_csv(client, customer_id):
    client.post(f"/customers/{customer_id}/items", json={"name": "Notes", "type": "A4 B/W", "pages": 5, "sets": 2})

    resp = client.get("/export/csv")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "sr_xerox_bill.csv" in resp.headers["content-disposition"]
    assert resp.text.strip().split("\n") == [
        "Customer,Item,Type,Pages,Sets,Price",
        "Customer 1,Notes,A4 B/W,5,2,10",
    ]


def test_export_xlsx(client):
    resp = client.get("/export/xlsx")
    assert resp.status_code == 200
    assert "sr_xerox_bill.xlsx" in resp.headers["content-disposition"]
