from __future__ import annotations

import os
from dataclasses import replace
from http import HTTPStatus
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///./test_storefront.db"
os.environ["EMAIL_USER"] = ""
os.environ["EMAIL_PASS"] = ""
os.environ["SEED_CATALOG"] = "false"
os.environ["ADMIN_EMAILS"] = ""

from storefront_api import config  # noqa: E402
from storefront_api import db  # noqa: E402
from storefront_api import main as app_module  # noqa: E402
from storefront_api.store import user_queries  # noqa: E402

ADMIN = "admin@ballerz.test"
CUSTOMER = "fan@ballerz.test"


@pytest.fixture(autouse=True)
def _clean_db():
	db.Base.metadata.drop_all(bind=db.engine)
	db.Base.metadata.create_all(bind=db.engine)
	yield


@pytest.fixture()
def client() -> Iterator[TestClient]:
	with TestClient(app_module.app) as c:
		yield c


@pytest.fixture()
def admin() -> dict[str, str]:
	user_queries.set_role(ADMIN, user_queries.ROLE_ADMIN)
	return {"X-User-Email": ADMIN}


@pytest.fixture()
def customer() -> dict[str, str]:
	return {"X-User-Email": CUSTOMER}


@pytest.fixture()
def email_settings(monkeypatch):
	configured = replace(
		config.settings,
		email_user="shop@ballerz.test",
		email_pass="secret",
		contact_receiver="support@ballerz.test",
	)
	monkeypatch.setattr(config, "settings", configured)
	return configured


def create_item(
	client: TestClient,
	headers: dict[str, str],
	description: str,
	price: float,
	category: str = "Football",
	**extra: Any,
) -> dict[str, Any]:
	resp = client.post(
		"/catalog/",
		json={"description": description, "category": category, "price": price, **extra},
		headers=headers,
	)
	assert resp.status_code == HTTPStatus.CREATED
	return resp.json()
