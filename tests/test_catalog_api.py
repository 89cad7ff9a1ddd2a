from __future__ import annotations

from http import HTTPStatus

from fastapi.testclient import TestClient

from conftest import create_item
from storefront_api.store import catalog_queries


def test_catalog_crud_and_filters(client: TestClient, admin) -> None:
	a = create_item(client, admin, "Argentina Home Jersey", 1299.0, images=["https://img/1.jpg"])
	b = create_item(client, admin, "Lakers Icon Jersey", 1499.0, category="Basketball")
	c = create_item(client, admin, "Straw Hat Tee", 899.0, category="Anime")

	r = client.get(f"/catalog/{a['id']}")
	assert r.status_code == HTTPStatus.OK
	assert r.json()["images"] == ["https://img/1.jpg"]
	assert client.get("/catalog/999999").status_code == HTTPStatus.NOT_FOUND

	r = client.get("/catalog/", params={"category": "Basketball"})
	assert [x["id"] for x in r.json()] == [b["id"]]

	r = client.get("/catalog/", params={"search": "JERSEY"})
	assert {x["id"] for x in r.json()} == {a["id"], b["id"]}

	r = client.get("/catalog/", params={"sort": "price-asc"})
	assert [x["id"] for x in r.json()] == [c["id"], a["id"], b["id"]]
	r = client.get("/catalog/", params={"sort": "price-desc"})
	assert [x["id"] for x in r.json()] == [b["id"], a["id"], c["id"]]
	r = client.get("/catalog/", params={"min_price": 1000, "max_price": 1300})
	assert [x["id"] for x in r.json()] == [a["id"]]
	assert client.get("/catalog/", params={"sort": "cheapest"}).status_code == HTTPStatus.UNPROCESSABLE_ENTITY
	assert client.get("/catalog/", params={"limit": 0}).status_code == HTTPStatus.UNPROCESSABLE_ENTITY

	r = client.patch(f"/catalog/{a['id']}", json={"price": 1199.0}, headers=admin)
	assert r.status_code == HTTPStatus.OK
	assert r.json()["price"] == 1199.0
	r = client.patch(f"/catalog/{a['id']}", json={"odd": "field"}, headers=admin)
	assert r.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
	r = client.patch("/catalog/123456", json={"price": 1.0}, headers=admin)
	assert r.status_code == HTTPStatus.NOT_MODIFIED

	r = client.put(
		f"/catalog/{c['id']}",
		json={"description": "Straw Hat Oversized Tee", "category": "Anime", "price": 999.0},
		headers=admin,
	)
	assert r.status_code == HTTPStatus.OK
	assert r.json()["description"] == "Straw Hat Oversized Tee"

	r = client.put(
		"/catalog/5555",
		params={"upsert": True},
		json={"description": "Seoul Hoodie", "category": "Korean", "price": 1799.0},
		headers=admin,
	)
	assert r.status_code == HTTPStatus.OK
	assert r.json()["id"] == 5555

	assert client.delete(f"/catalog/{b['id']}", headers=admin).status_code == HTTPStatus.OK
	assert client.get(f"/catalog/{b['id']}").status_code == HTTPStatus.NOT_FOUND
	assert all(x["id"] != b["id"] for x in client.get("/catalog/").json())


def test_catalog_writes_need_admin(client: TestClient, customer) -> None:
	body = {"description": "x", "category": "Football", "price": 1.0}
	assert client.post("/catalog/", json=body).status_code == HTTPStatus.UNAUTHORIZED
	assert client.post("/catalog/", json=body, headers=customer).status_code == HTTPStatus.FORBIDDEN
	assert client.delete("/catalog/1", headers=customer).status_code == HTTPStatus.FORBIDDEN


def test_product_page_lookups(client: TestClient, admin) -> None:
	a = create_item(client, admin, "Portugal Home 2024", 1299.0)
	related = [create_item(client, admin, f"Club Jersey {i}", 999.0)["id"] for i in range(5)]
	create_item(client, admin, "Celtics Jersey", 1399.0, category="Basketball")

	r = client.get("/catalog/by-description/Portugal Home 2024")
	assert r.status_code == HTTPStatus.OK
	assert r.json()["id"] == a["id"]
	assert client.get("/catalog/by-description/Nope").status_code == HTTPStatus.NOT_FOUND

	r = client.get(f"/catalog/{a['id']}/related")
	ids = [x["id"] for x in r.json()]
	assert len(ids) == 4
	assert set(ids) <= set(related)
	assert client.get("/catalog/424242/related").json() == []


def test_categories_start_with_defaults(client: TestClient, admin) -> None:
	create_item(client, admin, "Cricket Whites", 700.0, category="Cricket")
	r = client.get("/catalog/categories")
	assert r.json() == ["Football", "Basketball", "Anime", "Korean", "Cricket"]


def test_seed_only_when_empty() -> None:
	assert catalog_queries.seed_if_empty() == len(catalog_queries.DEMO_CATALOG)
	assert catalog_queries.seed_if_empty() == 0
