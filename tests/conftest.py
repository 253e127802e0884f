"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from flask.testing import FlaskClient

from config import Config
from services.customer_directory import CustomerDirectory

SHOP_BASE_URL = "https://test.myshopify.com/admin/api/2024-07/"
SHOPIFY_GRAPHQL_URL = SHOP_BASE_URL + "graphql.json"
ORDERS_URL = SHOP_BASE_URL + "orders.json"

_SETTINGS_MODULES = (
    "config",
    "api.app",
    "api.debug_routes",
    "services.shopify_client",
    "services.metafields",
    "services.metafield_seeder",
    "main",
)


@pytest.fixture
def test_settings() -> Config:
    """Config pointed at a fake shop with the request gate disabled."""
    return Config(
        shop_domain="test.myshopify.com",
        shopify_access_token="shpat_test_token",
        shopify_api_version="2024-07",
        upstream_requests_per_second=0,
        customer_directory_path="/nonexistent/customers.json",
    )


@pytest.fixture(autouse=True)
def _patch_settings(test_settings: Config, monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace the module-level settings everywhere they are imported."""
    import importlib

    for name in _SETTINGS_MODULES:
        module = importlib.import_module(name)
        monkeypatch.setattr(module, "settings", test_settings)

    from services import shopify_client

    shopify_client.reset_gate()
    yield
    shopify_client.reset_gate()


@pytest.fixture
def directory() -> CustomerDirectory:
    return CustomerDirectory.from_mapping({
        "1001": {"name": "Acme Team", "email": "acme@example.com"},
        "1002": {"name": "Globex Team"},
    })


@pytest.fixture
def app(directory: CustomerDirectory):
    from api.app import create_app

    app = create_app(directory=directory)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app) -> Generator[FlaskClient, None, None]:
    with app.test_client() as c:
        yield c


# ---------------------------------------------------------------------------
# Upstream payload factories
# ---------------------------------------------------------------------------


def make_order(
    order_id: int = 1,
    *,
    name: str | None = None,
    created_at: str = "2024-01-15T10:00:00Z",
    customer_id: int | None = 1001,
    email: str | None = "acme@example.com",
    line_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """A REST order as returned by ``orders.json``."""
    customer = None
    if customer_id is not None or email is not None:
        customer = {"id": customer_id, "email": email}
    return {
        "id": order_id,
        "name": name or f"#{1000 + order_id}",
        "created_at": created_at,
        "customer": customer,
        "fulfillment_status": "fulfilled",
        "line_items": line_items if line_items is not None else [
            {
                "name": "Widget",
                "price": "50.00",
                "quantity": 2,
                "fulfillable_quantity": 0,
                "fulfillment_status": "fulfilled",
            }
        ],
    }


def make_line_item(
    price: str = "10.00",
    quantity: int = 1,
    fulfillable_quantity: int = 0,
    fulfillment_status: str | None = "fulfilled",
) -> dict[str, Any]:
    return {
        "name": "Item",
        "price": price,
        "quantity": quantity,
        "fulfillable_quantity": fulfillable_quantity,
        "fulfillment_status": fulfillment_status,
    }


def make_metafield(key: str, value: str, namespace: str = "distacart") -> dict[str, Any]:
    return {"namespace": namespace, "key": key, "value": value, "type": "money"}


def make_fulfillment(
    items: list[tuple[int, str]],
    status: str = "SUCCESS",
) -> dict[str, Any]:
    """A GraphQL fulfillment; ``items`` is a list of (quantity, total amount)."""
    return {
        "id": "gid://shopify/Fulfillment/1",
        "status": status,
        "fulfillmentLineItems": {
            "edges": [
                {
                    "node": {
                        "id": f"gid://shopify/FulfillmentLineItem/{i}",
                        "quantity": qty,
                        "lineItem": {"id": f"gid://shopify/LineItem/{i}", "title": "Item"},
                        "originalTotalSet": {
                            "shopMoney": {"amount": amount, "currencyCode": "USD"}
                        },
                    }
                }
                for i, (qty, amount) in enumerate(items)
            ]
        },
    }
