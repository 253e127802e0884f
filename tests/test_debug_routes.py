"""Tests for the /api/debug passthrough endpoints."""

from __future__ import annotations

import json

import pytest
import responses

from tests.conftest import ORDERS_URL, SHOP_BASE_URL, SHOPIFY_GRAPHQL_URL, make_line_item, make_metafield


@pytest.mark.parametrize(
    "path",
    [
        "/api/debug/metafield-access",
        "/api/debug/graphql-metafields",
        "/api/debug/line-items",
        "/api/debug/fulfillments",
        "/api/debug/customer-details",
    ],
)
def test_required_id_param(client, path) -> None:
    resp = client.get(path)
    assert resp.status_code == 400
    assert "required" in resp.get_json()["error"]


@pytest.mark.parametrize("limit", ["0", "-3"])
def test_non_positive_limit(client, limit) -> None:
    resp = client.get(f"/api/debug/metafields?limit={limit}")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "limit must be a positive integer"}


@responses.activate
def test_metafields_summary(client) -> None:
    orders = [
        {
            "id": 1,
            "name": "#1001",
            "metafields": [make_metafield("additional_charges", "5")],
            "line_items": [make_line_item("10.00", quantity=2)],
        },
        {"id": 2, "name": "#1002", "line_items": []},
    ]
    responses.add(responses.GET, ORDERS_URL, json={"orders": orders}, status=200)

    resp = client.get("/api/debug/metafields?customerId=1001&limit=2")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["total_orders"] == 2
    assert data["orders"][0]["line_items_sum"] == 20.0
    assert data["summary"] == {"orders_with_metafields": 1, "total_metafields": 1}
    url = responses.calls[0].request.url
    assert "customer_id=1001" in url
    assert "limit=2" in url


@responses.activate
def test_graphql_metafields_filters_namespace(client) -> None:
    nodes = [make_metafield("additional_charges", "5"), make_metafield("note", "x", namespace="custom")]
    responses.add(
        responses.POST,
        SHOPIFY_GRAPHQL_URL,
        json={"data": {"order": {"metafields": {"edges": [{"node": n} for n in nodes]}}}},
        status=200,
    )

    resp = client.get("/api/debug/graphql-metafields?orderId=5")

    data = resp.get_json()
    assert data["summary"] == {"total_metafields": 2, "namespace_metafields": 1}
    assert json.loads(responses.calls[0].request.body)["variables"] == {"id": "gid://shopify/Order/5"}


@responses.activate
def test_fulfillment_statuses_counts(client) -> None:
    orders = [
        {
            "id": 1,
            "name": "#1001",
            "line_items": [
                make_line_item(fulfillment_status="fulfilled"),
                make_line_item(fulfillment_status=None),
            ],
        },
        {"id": 2, "name": "#1002", "line_items": [make_line_item(fulfillment_status="fulfilled")]},
    ]
    responses.add(responses.GET, ORDERS_URL, json={"orders": orders}, status=200)

    resp = client.get("/api/debug/fulfillment-statuses")

    data = resp.get_json()
    assert data["fulfillment_status_counts"] == {"fulfilled": 2, "null": 1}
    assert data["total_orders_checked"] == 2


@responses.activate
def test_fulfillments_passthrough(client) -> None:
    raw = {"data": {"order": {"id": "gid://shopify/Order/5", "fulfillments": [{"id": "f1"}]}}}
    responses.add(responses.POST, SHOPIFY_GRAPHQL_URL, json=raw, status=200)

    resp = client.get("/api/debug/fulfillments?orderId=5")

    data = resp.get_json()
    assert data["fulfillment_data"] == raw
    assert data["fulfillments_count"] == 1


@responses.activate
def test_customer_details(client) -> None:
    responses.add(
        responses.GET,
        SHOP_BASE_URL + "customers/1001.json",
        json={"customer": {"id": 1001, "email": "acme@example.com"}},
        status=200,
    )
    responses.add(
        responses.POST,
        SHOPIFY_GRAPHQL_URL,
        json={"data": {"customer": {"id": "gid://shopify/Customer/1001"}}},
        status=200,
    )

    resp = client.get("/api/debug/customer-details?customerId=1001")

    data = resp.get_json()
    assert data["rest_customer"]["email"] == "acme@example.com"
    assert data["graphql_customer"] == {"id": "gid://shopify/Customer/1001"}


@responses.activate
def test_permissions_without_orders(client) -> None:
    responses.add(responses.GET, ORDERS_URL, json={"orders": []}, status=200)

    resp = client.get("/api/debug/test-metafield-permissions")

    assert resp.status_code == 200
    assert resp.get_json() == {"error": "No orders found"}


@responses.activate
def test_upstream_error_status(client) -> None:
    responses.add(
        responses.GET,
        SHOP_BASE_URL + "orders/5.json",
        json={"errors": "Not Found"},
        status=404,
    )

    resp = client.get("/api/debug/line-items?orderId=5")

    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Failed to fetch line items"
