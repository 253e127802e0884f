"""Seed sample billing metafields onto recent orders for testing."""

from __future__ import annotations

import json
import logging
from typing import Any

from config import settings
from services.metafields import ACTUAL_TOTAL_KEY, ADDITIONAL_CHARGES_KEY
from services.shopify_client import rest_get, rest_post

logger = logging.getLogger(__name__)

# (additional_charges, actual_total_checkout_price)
SAMPLE_VALUES: list[tuple[float, float]] = [
    (15.50, 45.00),
    (25.00, 75.00),
    (10.25, 35.50),
    (30.75, 95.25),
    (20.00, 60.00),
]


def get_recent_orders(limit: int = 10) -> list[dict[str, Any]]:
    data = rest_get(
        "orders.json",
        {"limit": limit, "status": "any", "fields": "id,name,created_at"},
    )
    return data.get("orders") or []


def add_money_metafield(
    order_id: int | str,
    key: str,
    amount: float,
    currency_code: str = "USD",
) -> dict[str, Any]:
    """Create a ``money`` metafield on an order and return it."""
    payload = {
        "metafield": {
            "namespace": settings.metafield_namespace,
            "key": key,
            "value": json.dumps({"amount": float(amount), "currency_code": currency_code}),
            "type": "money",
        }
    }
    data = rest_post(f"orders/{order_id}/metafields.json", payload)
    logger.info(
        "Added metafield %s.%s = %s to order %s",
        settings.metafield_namespace, key, amount, order_id,
    )
    return data.get("metafield") or {}


def seed_sample_metafields(count: int = 5) -> list[dict[str, Any]]:
    """Write sample charge/cost metafields to the ``count`` most recent orders.

    Returns one summary dict per seeded order.  Upstream errors propagate.
    """
    orders = get_recent_orders(count)
    logger.info("Found %d order(s) to seed", len(orders))

    seeded = []
    for i, order in enumerate(orders):
        additional, actual = SAMPLE_VALUES[i % len(SAMPLE_VALUES)]
        add_money_metafield(order["id"], ADDITIONAL_CHARGES_KEY, additional)
        add_money_metafield(order["id"], ACTUAL_TOTAL_KEY, actual)
        seeded.append({
            "order_id": order["id"],
            "order_name": order.get("name"),
            "additional_charges": additional,
            "actual_total_checkout_price": actual,
        })
    return seeded
