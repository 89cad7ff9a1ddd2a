from __future__ import annotations

import json
from http import HTTPStatus
from urllib.parse import quote, unquote

import pytest
from fastapi.testclient import TestClient

from conftest import create_item
from storefront_api import config


def guest_cookie(client: TestClient) -> list[dict]:
	raw = client.cookies.get(config.settings.guest_cart_cookie)
	return json.loads(unquote(raw)) if raw else []


def test_guest_add_same_item_and_size_accumulates(client: TestClient, admin) -> None:
	a = create_item(client, admin, "Argentina Home Jersey", 1299.0)

	r = client.post("/cart/lines", json={"item_id": a["id"], "quantity": 2, "size": "M"})
	assert r.status_code == HTTPStatus.OK
	r = client.post("/cart/lines", json={"item_id": a["id"], "quantity": 1, "size": "M"})
	assert r.status_code == HTTPStatus.OK

	stored = guest_cookie(client)
	assert len(stored) == 1
	assert stored[0]["ID"] == a["id"]
	assert stored[0]["Size"] == "M"
	assert stored[0]["Quantity"] == 3

	data = client.get("/cart/").json()
	assert data["owner"] is None
	assert data["item_count"] == 3
	assert data["total"] == pytest.approx(3 * 1299.0)
	assert data["items"][0]["id"] is None
	assert data["items"][0]["description"] == "Argentina Home Jersey"


def test_guest_quantity_size_and_remove(client: TestClient, admin) -> None:
	a = create_item(client, admin, "Lakers Icon", 100.0, category="Basketball")
	b = create_item(client, admin, "Bulls Retro", 50.0, category="Basketball")
	client.post("/cart/lines", json={"item_id": a["id"], "quantity": 1, "size": "S"})
	client.post("/cart/lines", json={"item_id": b["id"], "quantity": 2, "size": "L"})

	r = client.post("/cart/lines/quantity", json={"item_id": a["id"], "size": "S", "delta": 2})
	assert r.status_code == HTTPStatus.OK
	assert r.json()["total"] == pytest.approx(3 * 100.0 + 2 * 50.0)

	r = client.post("/cart/lines/size", json={"item_id": a["id"], "size": "S", "new_size": "XL"})
	assert r.status_code == HTTPStatus.OK
	assert {(i["item_id"], i["size"]) for i in r.json()["items"]} == {(a["id"], "XL"), (b["id"], "L")}

	r = client.post("/cart/lines/quantity", json={"item_id": b["id"], "size": "L", "delta": -2})
	assert r.status_code == HTTPStatus.OK
	assert [i["item_id"] for i in r.json()["items"]] == [a["id"]]
	assert [l["ID"] for l in guest_cookie(client)] == [a["id"]]

	r = client.post("/cart/lines/remove", json={"item_id": a["id"], "size": "XL"})
	assert r.status_code == HTTPStatus.OK
	assert r.json()["items"] == []
	assert guest_cookie(client) == []

	r = client.post("/cart/lines/remove", json={"item_id": a["id"], "size": "XL"})
	assert r.status_code == HTTPStatus.NOT_FOUND


def test_guest_selector_requires_item_id(client: TestClient) -> None:
	r = client.post("/cart/lines/remove", json={"line_id": 1})
	assert r.status_code == HTTPStatus.BAD_REQUEST


def test_add_unknown_item_and_validation(client: TestClient) -> None:
	assert client.post("/cart/lines", json={"item_id": 9999}).status_code == HTTPStatus.NOT_FOUND
	assert client.post("/cart/lines", json={"item_id": 1, "quantity": 0}).status_code == HTTPStatus.UNPROCESSABLE_ENTITY
	assert client.post("/cart/lines", json={"item_id": 1, "size": "XXL"}).status_code == HTTPStatus.UNPROCESSABLE_ENTITY
	assert client.post("/cart/lines", json={"item_id": 1, "odd": 1}).status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_signed_in_cart_lives_in_store(client: TestClient, admin, customer) -> None:
	a = create_item(client, admin, "Real Madrid Away", 1000.0)
	b = create_item(client, admin, "Seoul Hoodie", 500.0, category="Korean")

	client.post("/cart/lines", json={"item_id": a["id"], "quantity": 1, "size": "M"}, headers=customer)
	client.post("/cart/lines", json={"item_id": a["id"], "quantity": 2, "size": "M"}, headers=customer)
	r = client.post(
		"/cart/lines",
		json={
			"item_id": b["id"],
			"quantity": 2,
			"size": "L",
			"is_customized": True,
			"customization_text": "KIM 7",
			"custom_price": 150.0,
		},
		headers=customer,
	)
	assert r.status_code == HTTPStatus.OK
	data = r.json()
	assert data["owner"] == "fan@ballerz.test"
	assert data["total"] == pytest.approx(3 * 1000.0 + 2 * 650.0)
	assert all(i["id"] is not None for i in data["items"])
	assert client.cookies.get(config.settings.guest_cart_cookie) is None

	# a guest sees nothing of it
	assert client.get("/cart/").json()["items"] == []

	line_a = next(i for i in data["items"] if i["item_id"] == a["id"])
	assert line_a["quantity"] == 3

	r = client.post("/cart/lines/size", json={"line_id": line_a["id"], "new_size": "L"}, headers=customer)
	assert r.status_code == HTTPStatus.OK

	r = client.post("/cart/lines/quantity", json={"line_id": line_a["id"], "delta": -3}, headers=customer)
	assert r.status_code == HTTPStatus.OK
	assert [i["item_id"] for i in r.json()["items"]] == [b["id"]]

	other = {"X-User-Email": "someone-else@ballerz.test"}
	line_b = r.json()["items"][0]["id"]
	r = client.post("/cart/lines/remove", json={"line_id": line_b}, headers=other)
	assert r.status_code == HTTPStatus.NOT_FOUND

	r = client.delete("/cart/", headers=customer)
	assert r.status_code == HTTPStatus.OK
	assert r.json()["items"] == []


def test_deleted_catalog_item_prices_at_zero(client: TestClient, admin, customer) -> None:
	a = create_item(client, admin, "Retro Jersey", 800.0)
	b = create_item(client, admin, "Anime Tee", 400.0, category="Anime")
	client.post("/cart/lines", json={"item_id": a["id"], "quantity": 1}, headers=customer)
	client.post("/cart/lines", json={"item_id": b["id"], "quantity": 2}, headers=customer)

	assert client.delete(f"/catalog/{a['id']}", headers=admin).status_code == HTTPStatus.OK

	data = client.get("/cart/", headers=customer).json()
	items = {i["item_id"]: i for i in data["items"]}
	assert items[a["id"]]["available"] is False
	assert items[a["id"]]["line_total"] == 0
	assert data["total"] == pytest.approx(800.0)
	assert data["item_count"] == 3


def test_merge_guest_cart_on_sign_in(client: TestClient, admin, customer) -> None:
	a = create_item(client, admin, "Brazil Home", 1200.0)
	client.post("/cart/lines", json={"item_id": a["id"], "quantity": 1, "size": "M"}, headers=customer)

	client.post("/cart/lines", json={"item_id": a["id"], "quantity": 2, "size": "M"})
	client.post("/cart/lines", json={"item_id": a["id"], "quantity": 1, "size": "S"})
	assert len(guest_cookie(client)) == 2

	r = client.post("/cart/merge", headers=customer)
	assert r.status_code == HTTPStatus.OK
	quantities = {i["size"]: i["quantity"] for i in r.json()["items"]}
	assert quantities == {"M": 3, "S": 1}
	assert guest_cookie(client) == []

	assert client.post("/cart/merge").status_code == HTTPStatus.UNAUTHORIZED


def test_guest_clear_drops_cookie(client: TestClient, admin) -> None:
	a = create_item(client, admin, "Japan Away", 900.0)
	client.post("/cart/lines", json={"item_id": a["id"]})
	assert guest_cookie(client)[0]["Size"] == "S"

	r = client.delete("/cart/")
	assert r.status_code == HTTPStatus.OK
	assert guest_cookie(client) == []


def test_guest_cookie_with_document_ids(client: TestClient, admin) -> None:
	a = create_item(client, admin, "Spain Home", 400.0)
	raw = quote(json.dumps([
		{"ID": "A", "Size": "M", "Quantity": 2},
		{"ID": str(a["id"]), "Size": "S", "Quantity": 1},
	]))

	r = client.post(
		"/cart/lines/quantity",
		json={"item_id": "A", "size": "M", "delta": 1},
		headers={"cookie": f"{config.settings.guest_cart_cookie}={raw}"},
	)
	assert r.status_code == HTTPStatus.OK
	items = {i["item_id"]: i for i in r.json()["items"]}
	assert items["A"]["quantity"] == 3
	assert items["A"]["available"] is False
	assert items[str(a["id"])]["available"] is True
	assert r.json()["total"] == pytest.approx(400.0)
	assert guest_cookie(client)[0] == {"ID": "A", "Size": "M", "Quantity": 3}

	assert client.post("/cart/lines", json={"item_id": "A"}).status_code == HTTPStatus.NOT_FOUND


def test_guest_customized_line_kept_apart(client: TestClient, admin) -> None:
	a = create_item(client, admin, "Portugal Home", 100.0)
	client.post("/cart/lines", json={"item_id": a["id"], "size": "M"})
	r = client.post(
		"/cart/lines",
		json={"item_id": a["id"], "size": "M", "is_customized": True, "customization_text": "CR7", "custom_price": 50.0},
	)
	assert r.json()["total"] == pytest.approx(250.0)
	assert len(guest_cookie(client)) == 2

	r = client.post(
		"/cart/lines/remove",
		json={"item_id": a["id"], "size": "M", "is_customized": True, "customization_text": "CR7"},
	)
	assert r.status_code == HTTPStatus.OK
	assert [(i["is_customized"], i["quantity"]) for i in r.json()["items"]] == [(False, 1)]
	assert r.json()["total"] == pytest.approx(100.0)
