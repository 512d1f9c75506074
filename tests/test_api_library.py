"""API-level tests for the material library, settings and stateless pricing."""

import pytest
from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def clean_db():
    from core.database import Base, engine
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


def create_material(**overrides):
    payload = {"name": "Beeswax", "price": 20, "quantity": 4, "unit": "kg", "stock_level": 10, "reorder_point": 2}
    payload.update(overrides)
    resp = client.post("/materials", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_price_per_unit_is_derived_from_pack_price():
    data = create_material()
    assert data["price_per_unit"] == pytest.approx(5.0)
    assert data["is_low_stock"] is False


def test_explicit_price_per_unit_wins():
    data = create_material(price_per_unit=4.5)
    assert data["price_per_unit"] == pytest.approx(4.5)


def test_low_stock_filter():
    create_material(name="Plenty", stock_level=50, reorder_point=5)
    create_material(name="Running out", stock_level=3, reorder_point=5)
    create_material(name="At threshold", stock_level=5, reorder_point=5)

    resp = client.get("/materials", params={"low_stock": "true", "sort_by": "name", "sort_order": "asc"})
    assert resp.status_code == 200
    assert [m["name"] for m in resp.json()] == ["At threshold", "Running out"]


def test_search_and_category_filters():
    create_material(name="Soy wax", category="Wax", supplier="CandleCo")
    create_material(name="Cotton wick", category="Wicks")

    assert [m["name"] for m in client.get("/materials", params={"search": "candleco"}).json()] == ["Soy wax"]
    assert [m["name"] for m in client.get("/materials", params={"category": "Wicks"}).json()] == ["Cotton wick"]
    assert len(client.get("/materials", params={"category": "all"}).json()) == 2
    assert client.get("/materials/categories").json() == ["Wax", "Wicks"]


def test_partial_update_recomputes_price_per_unit():
    material = create_material()

    resp = client.patch(f"/materials/{material['id']}", json={"price": 30})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["price"] == pytest.approx(30.0)
    assert data["price_per_unit"] == pytest.approx(7.5)
    assert data["name"] == "Beeswax"


def test_invalid_material_is_rejected():
    resp = client.post("/materials", json={"name": "Bad", "price": -1, "quantity": 1, "unit": "kg"})
    assert resp.status_code == 422
    resp = client.post(
        "/materials", json={"name": "Bad link", "price": 1, "quantity": 1, "unit": "kg", "supplier_link": "ftp://x"}
    )
    assert resp.status_code == 422


def test_delete_material_unlinks_product_lines():
    material = create_material()
    product = client.post(
        "/products",
        json={
            "name": "Balm",
            "materials": [{"name": "Beeswax", "quantity": 0.1, "price_per_unit": 5, "library_material_id": material["id"]}],
        },
    ).json()

    assert client.delete(f"/materials/{material['id']}").status_code == 204
    assert client.get(f"/materials/{material['id']}").status_code == 404

    data = client.get(f"/products/{product['id']}").json()
    assert data["materials"][0]["library_material_id"] is None
    assert data["costing"]["materials_cost"] == pytest.approx(0.5)


def test_settings_defaults_and_update():
    resp = client.get("/settings")
    assert resp.status_code == 200
    data = resp.json()
    assert data["currency"] == "USD"
    assert data["unit_system"] == "metric"
    assert "kg" in data["units"]

    resp = client.put("/settings", json={"currency": "eur", "unit_system": "imperial", "tax_percentage": "8.5"})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["currency"] == "EUR"
    assert data["tax_percentage"] == pytest.approx(8.5)
    assert "lb" in data["units"]

    assert client.get("/settings").json()["currency"] == "EUR"


def test_settings_reject_out_of_range_tax():
    assert client.put("/settings", json={"tax_percentage": 120}).status_code == 422


def test_pricing_preview():
    resp = client.post("/pricing/preview", json={"method": "markup", "value": 50, "cost": 10})
    assert resp.status_code == 200
    data = resp.json()
    assert data["price"] == pytest.approx(15.0)
    assert data["profit"] == pytest.approx(5.0)
    assert data["margin"] == pytest.approx(33.33)
    assert data["markup"] == pytest.approx(50.0)
    assert data["break_even_price"] == pytest.approx(10.0)


def test_pricing_convert():
    resp = client.post("/pricing/convert", json={"method": "margin", "price": 100, "cost": 80})
    assert resp.status_code == 200
    assert resp.json() == {"method": "margin", "value": 20.0}


def test_pricing_rejects_unknown_method_and_negative_cost():
    assert client.post("/pricing/preview", json={"method": "bogus", "value": 1, "cost": 1}).status_code == 422
    assert client.post("/pricing/preview", json={"method": "price", "value": 1, "cost": -1}).status_code == 422


def test_pricing_methods_listing():
    data = client.get("/pricing/methods").json()
    assert [m["method"] for m in data] == ["markup", "price", "profit", "margin"]
    assert all(m["description"] for m in data)
