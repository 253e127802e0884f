"""Per-order enrichment for the revenue report.

Each order is enriched with its metafields and, when possible, the exact
revenue of its successful fulfillments.  Upstream failures never drop an
order; they downgrade the result:

``full``
    metafields and fulfillments fetched.
``degraded``
    metafields fetched, fulfillment query failed; ``line_sum`` comes from
    the order's own line items.
``failed``
    metafield query failed; ``line_sum`` comes from the line items and the
    metafield-derived figures are zero.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel

from services.shopify_client import graphql_request, order_gid
from services.shopify_queries import ORDER_FULFILLMENTS_QUERY, ORDER_METAFIELDS_QUERY

logger = logging.getLogger(__name__)

EXCLUDED_LINE_ITEM_STATUSES = frozenset({"removed", "cancelled", "refunded", "returned"})


class EnrichmentStatus(str, Enum):
    FULL = "full"
    DEGRADED = "degraded"
    FAILED = "failed"


class OrderEnrichment(BaseModel):
    """Outcome of enriching one order."""

    status: EnrichmentStatus
    line_sum: float = 0.0
    metafields: list[dict[str, Any]] = []
    reason: str | None = None


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def fetch_order_metafields(order_id: int | str) -> list[dict[str, Any]]:
    data = graphql_request(ORDER_METAFIELDS_QUERY, {"id": order_gid(order_id)})
    order = data.get("order") or {}
    edges = (order.get("metafields") or {}).get("edges") or []
    return [edge["node"] for edge in edges]


def fetch_order_fulfillments(order_id: int | str) -> list[dict[str, Any]]:
    data = graphql_request(ORDER_FULFILLMENTS_QUERY, {"id": order_gid(order_id)})
    order = data.get("order") or {}
    return order.get("fulfillments") or []


def fulfilled_line_sum(fulfillments: list[dict[str, Any]]) -> float:
    """Revenue of all successfully fulfilled line items."""
    total = 0.0
    for fulfillment in fulfillments:
        if fulfillment.get("status") != "SUCCESS":
            continue
        edges = (fulfillment.get("fulfillmentLineItems") or {}).get("edges") or []
        for edge in edges:
            node = edge.get("node") or {}
            quantity = _number(node.get("quantity"))
            if quantity <= 0:
                continue
            money = ((node.get("originalTotalSet") or {}).get("shopMoney") or {})
            price = _number(money.get("amount")) / quantity
            if price > 0:
                total += price * quantity
    return total


def fallback_line_sum(line_items: list[dict[str, Any]] | None) -> float:
    """Revenue of the already-fulfilled quantity of each live line item."""
    total = 0.0
    for item in line_items or []:
        if item.get("fulfillment_status") in EXCLUDED_LINE_ITEM_STATUSES:
            continue
        quantity = _number(item.get("quantity"))
        fulfillable = _number(item.get("fulfillable_quantity"))
        if fulfillable < quantity:
            total += _number(item.get("price")) * (quantity - fulfillable)
    return total


def enrich_order(order: dict[str, Any]) -> OrderEnrichment:
    """Fetch metafields and fulfillment revenue for ``order``.

    Never raises for upstream failures; see the module docstring for the
    degradation levels.
    """
    order_id = order.get("id")

    try:
        metafields = fetch_order_metafields(order_id)
    except Exception as exc:
        logger.warning("Order %s: metafield fetch failed, using line items: %s", order_id, exc)
        return OrderEnrichment(
            status=EnrichmentStatus.FAILED,
            line_sum=fallback_line_sum(order.get("line_items")),
            reason=f"metafields: {exc}",
        )

    try:
        fulfillments = fetch_order_fulfillments(order_id)
    except Exception as exc:
        logger.warning(
            "Order %s: fulfillment fetch failed, falling back to line items: %s", order_id, exc
        )
        return OrderEnrichment(
            status=EnrichmentStatus.DEGRADED,
            line_sum=fallback_line_sum(order.get("line_items")),
            metafields=metafields,
            reason=f"fulfillments: {exc}",
        )

    line_sum = fulfilled_line_sum(fulfillments)
    logger.debug("Order %s: fulfilled line sum %.2f", order_id, line_sum)
    return OrderEnrichment(
        status=EnrichmentStatus.FULL,
        line_sum=line_sum,
        metafields=metafields,
    )
