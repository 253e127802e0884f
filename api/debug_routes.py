"""Diagnostic passthroughs showing how Shopify exposes order metadata.

These endpoints do no aggregation beyond simple counts; they exist to
inspect raw REST and GraphQL responses while troubleshooting reports.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, jsonify, request

from api.errors import error_response, handle_errors
from api.exceptions import ValidationError
from config import settings
from services.enrichment import fetch_order_metafields
from services.shopify_client import customer_gid, graphql_raw, graphql_request, order_gid, rest_get
from services.shopify_queries import (
    CUSTOMER_DETAILS_QUERY,
    ORDER_FULFILLMENTS_QUERY,
    ORDER_METAFIELDS_WITH_OWNER_QUERY,
)

logger = logging.getLogger(__name__)

debug_bp = Blueprint("debug", __name__, url_prefix="/api/debug")


def _limit_arg(default: int = 5) -> int:
    limit = request.args.get("limit", default=default, type=int)
    if limit is None or limit < 1:
        raise ValidationError("limit must be a positive integer")
    return limit


def _line_items_sum(line_items: list[dict[str, Any]]) -> float:
    total = 0.0
    for li in line_items:
        try:
            total += float(li.get("price") or 0) * float(li.get("quantity") or 0)
        except (TypeError, ValueError):
            continue
    return total


def _in_namespace(metafields: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [m for m in metafields if m.get("namespace") == settings.metafield_namespace]


def _graphql_nodes(data: dict, *path: str) -> list[dict[str, Any]]:
    node: Any = data
    for key in path:
        node = (node or {}).get(key)
    return [edge["node"] for edge in (node or {}).get("edges") or []]


def _first_order() -> dict[str, Any] | None:
    orders = rest_get("orders.json", {"limit": 1, "fields": "id,name"}).get("orders") or []
    return orders[0] if orders else None


@debug_bp.route("/metafields", methods=["GET"])
@handle_errors(failure_message="Failed to fetch metafields")
def metafields() -> tuple:
    """Recent orders with whatever metafields the REST listing includes."""
    params: dict[str, Any] = {
        "limit": _limit_arg(),
        "status": "any",
        "fields": "id,name,created_at,customer,line_items,metafields",
    }
    customer_id = request.args.get("customerId")
    if customer_id:
        params["customer_id"] = customer_id

    orders = rest_get("orders.json", params).get("orders") or []
    rows = [
        {
            "order_id": o.get("id"),
            "order_name": o.get("name"),
            "metafields": o.get("metafields") or [],
            "metafield_count": len(o.get("metafields") or []),
            "line_items_sum": _line_items_sum(o.get("line_items") or []),
        }
        for o in orders
    ]
    return jsonify({
        "orders": rows,
        "total_orders": len(orders),
        "summary": {
            "orders_with_metafields": sum(1 for r in rows if r["metafield_count"] > 0),
            "total_metafields": sum(r["metafield_count"] for r in rows),
        },
    }), 200


@debug_bp.route("/metafield-access", methods=["GET"])
@handle_errors(failure_message="Failed to test metafield access")
def metafield_access() -> tuple:
    """Compare the order REST view with its direct metafield endpoints."""
    order_id = request.args.get("orderId")
    if not order_id:
        return error_response("orderId is required", 400)

    order = rest_get(f"orders/{order_id}.json", {"fields": "id,name,metafields"}).get("order")
    direct = rest_get(f"orders/{order_id}/metafields.json").get("metafields") or []
    scoped = rest_get(
        f"orders/{order_id}/metafields.json", {"namespace": settings.metafield_namespace}
    ).get("metafields") or []

    return jsonify({
        "order": order,
        "metafields": direct,
        "namespace_metafields": scoped,
        "summary": {
            "total_metafields": len(direct),
            "namespace_metafields": len(scoped),
        },
    }), 200


@debug_bp.route("/graphql-metafields", methods=["GET"])
@handle_errors(failure_message="Failed to fetch GraphQL metafields")
def graphql_metafields() -> tuple:
    """Metafields for one order as returned by the report's GraphQL query."""
    order_id = request.args.get("orderId")
    if not order_id:
        return error_response("orderId is required", 400)

    nodes = fetch_order_metafields(order_id)
    scoped = _in_namespace(nodes)
    return jsonify({
        "order_id": order_id,
        "metafields": nodes,
        "namespace_metafields": scoped,
        "summary": {
            "total_metafields": len(nodes),
            "namespace_metafields": len(scoped),
        },
    }), 200


@debug_bp.route("/test-metafield-permissions", methods=["GET"])
@handle_errors(failure_message="Failed to test metafield permissions")
def test_metafield_permissions() -> tuple:
    """REST vs GraphQL vs namespace metafield access for the latest order."""
    order = _first_order()
    if order is None:
        return jsonify({"error": "No orders found"}), 200

    order_id = order["id"]
    rest_fields = rest_get(f"orders/{order_id}/metafields.json").get("metafields") or []
    graphql_fields = fetch_order_metafields(order_id)
    namespace_fields = rest_get(
        "metafields.json", {"namespace": settings.metafield_namespace}
    ).get("metafields") or []

    return jsonify({
        "test_order": {"id": order_id, "name": order.get("name")},
        "rest_metafields": rest_fields,
        "graphql_metafields": graphql_fields,
        "namespace_metafields": namespace_fields,
        "summary": {
            "rest_count": len(rest_fields),
            "graphql_count": len(graphql_fields),
            "namespace_count": len(namespace_fields),
        },
    }), 200


@debug_bp.route("/line-items", methods=["GET"])
@handle_errors(failure_message="Failed to fetch line items")
def line_items() -> tuple:
    order_id = request.args.get("orderId")
    if not order_id:
        return error_response("orderId is required", 400)

    order = rest_get(f"orders/{order_id}.json", {"fields": "id,name,line_items"}).get("order") or {}
    items = order.get("line_items") or []
    structure = [
        {
            "id": li.get("id"),
            "name": li.get("name"),
            "price": li.get("price"),
            "quantity": li.get("quantity"),
            "fulfillment_status": li.get("fulfillment_status"),
            "requires_shipping": li.get("requires_shipping"),
            "taxable": li.get("taxable"),
            "total_discount": li.get("total_discount"),
        }
        for li in items
    ]
    return jsonify({
        "order_id": order.get("id"),
        "order_name": order.get("name"),
        "line_items": items,
        "line_items_count": len(items),
        "line_items_structure": structure,
    }), 200


@debug_bp.route("/fulfillment-statuses", methods=["GET"])
@handle_errors(failure_message="Failed to check fulfillment statuses")
def fulfillment_statuses() -> tuple:
    """Count line-item fulfillment statuses across recent orders."""
    orders = rest_get(
        "orders.json",
        {"limit": _limit_arg(), "status": "any", "fields": "id,name,line_items"},
    ).get("orders") or []

    counts: dict[str, int] = {}
    details = []
    for order in orders:
        items = []
        for li in order.get("line_items") or []:
            status = li.get("fulfillment_status") or "null"
            counts[status] = counts.get(status, 0) + 1
            items.append({
                "name": li.get("name"),
                "price": li.get("price"),
                "quantity": li.get("quantity"),
                "fulfillment_status": li.get("fulfillment_status"),
                "fulfillable_quantity": li.get("fulfillable_quantity"),
                "current_quantity": li.get("current_quantity"),
            })
        details.append({
            "order_id": order.get("id"),
            "order_name": order.get("name"),
            "line_items": items,
        })

    return jsonify({
        "fulfillment_status_counts": counts,
        "order_details": details,
        "total_orders_checked": len(orders),
    }), 200


@debug_bp.route("/metafield-definitions", methods=["GET"])
@handle_errors(failure_message="Failed to check metafield definitions")
def metafield_definitions() -> tuple:
    """Shop-level metafields plus one order's REST and GraphQL metafields."""
    namespace = settings.metafield_namespace
    definitions = rest_get("metafields.json", {"limit": 50}).get("metafields") or []
    scoped = rest_get(
        "metafields.json", {"namespace": namespace, "limit": 50}
    ).get("metafields") or []
    order_level = rest_get(
        "metafields.json", {"owner_type": "order", "limit": 50}
    ).get("metafields") or []

    body: dict[str, Any] = {
        "definitions": definitions,
        "namespace_metafields": scoped,
        "order_metafields": order_level,
        "summary": {
            "total_definitions": len(definitions),
            "namespace_count": len(scoped),
            "order_metafields_count": len(order_level),
        },
    }

    order = _first_order()
    if order is not None:
        order_id = order["id"]
        rest_fields = rest_get(
            f"orders/{order_id}/metafields.json", {"limit": 50}
        ).get("metafields") or []
        data = graphql_request(ORDER_METAFIELDS_WITH_OWNER_QUERY, {"id": order_gid(order_id)})
        graphql_fields = _graphql_nodes(data, "order", "metafields")

        body["specific_order"] = {
            "id": order_id,
            "name": order.get("name"),
            "metafields": rest_fields,
            "graphql_metafields": graphql_fields,
        }
        body["summary"]["specific_order_count"] = len(rest_fields)
        body["summary"]["graphql_count"] = len(graphql_fields)

    return jsonify(body), 200


@debug_bp.route("/fulfillments", methods=["GET"])
@handle_errors(failure_message="Failed to fetch fulfillments")
def fulfillments() -> tuple:
    """Raw fulfillment query result used by the report."""
    order_id = request.args.get("orderId")
    if not order_id:
        return error_response("orderId parameter is required", 400)

    raw = graphql_raw(ORDER_FULFILLMENTS_QUERY, {"id": order_gid(order_id)})
    order = (raw.get("data") or {}).get("order") or {}
    return jsonify({
        "order_id": order_id,
        "fulfillment_data": raw,
        "fulfillments_count": len(order.get("fulfillments") or []),
    }), 200


@debug_bp.route("/customer-details", methods=["GET"])
@handle_errors(failure_message="Failed to fetch customer details")
def customer_details() -> tuple:
    """A customer's REST record next to its GraphQL record."""
    customer_id = request.args.get("customerId")
    if not customer_id:
        return error_response("customerId parameter is required", 400)

    rest_data = rest_get(f"customers/{customer_id}.json")
    graphql_data = graphql_raw(CUSTOMER_DETAILS_QUERY, {"id": customer_gid(customer_id)})

    return jsonify({
        "customer_id": customer_id,
        "rest_api_data": rest_data,
        "graphql_data": graphql_data,
        "rest_customer": rest_data.get("customer"),
        "graphql_customer": (graphql_data.get("data") or {}).get("customer"),
    }), 200
