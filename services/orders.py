"""Order and customer listings from the Shopify REST Admin API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from api.exceptions import ValidationError
from services.shopify_client import rest_get

logger = logging.getLogger(__name__)

PAGE_SIZE = 250
MAX_ORDERS = 10_000

ORDER_FIELDS = "id,name,created_at,customer,line_items,metafields,fulfillment_status"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 date or date-time. Naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date_range(start: str | None, end: str | None) -> tuple[datetime, datetime]:
    """Validate a ``start``/``end`` pair before any upstream call is made."""
    if not start or not end:
        raise ValidationError("Missing required parameters: start and end dates are required")

    try:
        start_dt = parse_timestamp(str(start))
        end_dt = parse_timestamp(str(end))
    except ValueError:
        raise ValidationError(
            "Invalid date format. Use ISO 8601 format (YYYY-MM-DDTHH:mm:ss.sssZ)"
        ) from None

    if start_dt >= end_dt:
        raise ValidationError("Start date must be before end date")

    return start_dt, end_dt


def to_shopify_timestamp(dt: datetime) -> str:
    """Render ``dt`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def fetch_fulfilled_orders(
    start: datetime,
    end: datetime,
    customer_id: int | str | None = None,
) -> list[dict[str, Any]]:
    """Fetch every shipped order created in ``[start, end]``.

    Pages are requested with ``since_id`` set to the last id of the previous
    page.  Fetching stops on a short page, or once more than ``MAX_ORDERS``
    have been collected; in the latter case the orders already fetched are
    returned.
    """
    params: dict[str, Any] = {
        "limit": PAGE_SIZE,
        "status": "any",
        "fulfillment_status": "shipped",
        "created_at_min": to_shopify_timestamp(start),
        "created_at_max": to_shopify_timestamp(end),
        "fields": ORDER_FIELDS,
    }
    if customer_id:
        params["customer_id"] = str(customer_id)

    orders: list[dict[str, Any]] = []
    since_id = None

    while True:
        page_params = dict(params)
        if since_id is not None:
            page_params["since_id"] = since_id

        data = rest_get("orders.json", page_params)
        chunk = data.get("orders") or []
        orders.extend(chunk)

        logger.info(
            "Fetched order batch: %d (total %d, more=%s)",
            len(chunk), len(orders), len(chunk) == PAGE_SIZE,
        )

        if len(chunk) < PAGE_SIZE:
            break
        since_id = chunk[-1]["id"]

        if len(orders) > MAX_ORDERS:
            logger.warning(
                "Reached maximum records limit (%d); stopping at %d orders",
                MAX_ORDERS, len(orders),
            )
            break

    return orders


def list_customers(since_id: int | str | None = None) -> dict[str, Any]:
    """Return a single page of customer ids; the caller drives pagination."""
    params: dict[str, Any] = {"limit": PAGE_SIZE, "fields": "id"}
    if since_id:
        params["since_id"] = str(since_id)

    data = rest_get("customers.json", params)
    customers = data.get("customers") or []
    logger.info("Fetched %d customer(s)", len(customers))
    return {
        "customers": customers,
        "count": len(customers),
        "hasMore": len(customers) == PAGE_SIZE,
    }
