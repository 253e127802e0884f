"""Monthly revenue report per customer.

Shared by the ``POST /api/report`` route and the ``report`` CLI command.
The pipeline is: validate the request, fetch shipped orders, enrich each
order in turn, build one :class:`ReportRow` per order, then group rows by
customer and calendar month.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from api.exceptions import ValidationError
from services.customer_directory import CustomerDirectory
from services.enrichment import EnrichmentStatus, OrderEnrichment, enrich_order
from services.metafields import parse_actual_total, parse_additional_charges
from services.orders import fetch_fulfilled_orders, parse_date_range, parse_timestamp

logger = logging.getLogger(__name__)


class Metric(str, Enum):
    BILLING = "billing"
    ACTUAL = "actual"

    @property
    def field(self) -> str:
        return "actual_spend" if self is Metric.ACTUAL else "billing_amount"


class ReportRequest(BaseModel):
    start: str
    end: str
    start_at: datetime
    end_at: datetime
    metric: Metric
    customer_id: str | None = None


class ReportRow(BaseModel):
    """Financial figures for one fulfilled order."""

    order_id: int | str | None
    order_number: str | None = None
    order_date: str | None = None
    customer_id: int | str | None = None
    customer_name: str
    customer_email: str | None = None
    line_sum: float
    additional_charges: float
    billing_amount: float
    actual_spend: float
    profit_margin: float
    enrichment_status: EnrichmentStatus


class SummaryGroup(BaseModel):
    customer: str
    month: str
    orders: int
    amount: float
    order_numbers: str
    total_billing: float
    total_actual: float
    profit_margin: float


def round2(value: float) -> float:
    """Round to cents with halves rounded up (not to even)."""
    return math.floor(value * 100 + 0.5) / 100


def profit_margin(billing: float, actual: float) -> float:
    return (billing - actual) / billing * 100 if billing > 0 else 0.0


def parse_report_request(body: dict[str, Any] | None) -> ReportRequest:
    """Validate a report request body. Raises ValidationError (400)."""
    if not isinstance(body, dict):
        body = {}
    start = body.get("start")
    end = body.get("end")
    metric = body.get("metric")

    if not start or not end or not metric:
        raise ValidationError("Missing required fields: start, end, and metric are required")

    try:
        metric = Metric(metric)
    except ValueError:
        raise ValidationError('Invalid metric. Must be "billing" or "actual"') from None

    start_at, end_at = parse_date_range(start, end)
    customer_id = body.get("customerId")

    return ReportRequest(
        start=str(start),
        end=str(end),
        start_at=start_at,
        end_at=end_at,
        metric=metric,
        customer_id=str(customer_id) if customer_id else None,
    )


def build_report_row(
    order: dict[str, Any],
    enrichment: OrderEnrichment,
    directory: CustomerDirectory,
) -> ReportRow:
    customer = order.get("customer") or {}
    customer_id = customer.get("id")
    name = order.get("name")

    if enrichment.status is EnrichmentStatus.FAILED:
        additional = 0.0
        actual = 0.0
    else:
        additional = parse_additional_charges(enrichment.metafields)
        actual = parse_actual_total(enrichment.metafields)

    line_sum = enrichment.line_sum
    billing = line_sum + additional
    margin = 0.0 if enrichment.status is EnrichmentStatus.FAILED else profit_margin(billing, actual)

    return ReportRow(
        order_id=order.get("id"),
        order_number=str(name).replace("#", "", 1).strip() if name else None,
        order_date=order.get("created_at"),
        customer_id=customer_id,
        customer_name=directory.name_for(customer_id),
        customer_email=customer.get("email") or directory.email_for(customer_id),
        line_sum=line_sum,
        additional_charges=additional,
        billing_amount=billing,
        actual_spend=actual,
        profit_margin=margin,
        enrichment_status=enrichment.status,
    )


def month_key(timestamp: str) -> str:
    """Calendar month (UTC) of an ISO timestamp, as ``YYYY-MM``."""
    return parse_timestamp(timestamp).astimezone(timezone.utc).strftime("%Y-%m")


def customer_key(row: ReportRow) -> str:
    if row.customer_email:
        return row.customer_email
    return str(row.customer_id) if row.customer_id else "unknown"


def group_rows(rows: list[ReportRow], metric: Metric) -> list[SummaryGroup]:
    """Group rows by (customer, month), sorted by month then customer."""
    groups: dict[tuple[str, str], dict[str, Any]] = {}

    for row in rows:
        key = (customer_key(row), month_key(row.order_date))
        group = groups.setdefault(
            key,
            {
                "orders": 0,
                "amount": 0.0,
                "total_billing": 0.0,
                "total_actual": 0.0,
                "order_numbers": set(),
            },
        )
        group["orders"] += 1
        group["amount"] += getattr(row, metric.field)
        group["total_billing"] += row.billing_amount
        group["total_actual"] += row.actual_spend
        if row.order_number:
            group["order_numbers"].add(row.order_number)

    summary = [
        SummaryGroup(
            customer=customer,
            month=month,
            orders=g["orders"],
            amount=g["amount"],
            order_numbers=", ".join(sorted(g["order_numbers"])),
            total_billing=g["total_billing"],
            total_actual=g["total_actual"],
            profit_margin=round2(profit_margin(g["total_billing"], g["total_actual"])),
        )
        for (customer, month), g in groups.items()
    ]
    summary.sort(key=lambda s: (s.month, s.customer))
    return summary


def compute_analytics(summary: list[SummaryGroup], request: ReportRequest) -> dict[str, Any]:
    """Overall figures across all groups.

    ``avgProfitMargin`` is the mean of the group margins, not a margin of
    the overall totals.
    """
    avg_margin = sum(g.profit_margin for g in summary) / len(summary) if summary else 0.0
    return {
        "totalRevenue": sum(g.amount for g in summary),
        "totalOrders": sum(g.orders for g in summary),
        "uniqueCustomers": len({g.customer for g in summary}),
        "avgProfitMargin": round2(avg_margin),
        "dateRange": {"start": request.start, "end": request.end},
        "metric": request.metric.value,
        "customerId": request.customer_id,
    }


def build_report(
    rows: list[ReportRow],
    request: ReportRequest,
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    summary = group_rows(rows, request.metric)
    analytics = compute_analytics(summary, request)
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        "summary": [g.model_dump() for g in summary],
        "detail": [r.model_dump(mode="json") for r in rows],
        "analytics": analytics,
        "metadata": {
            "generatedAt": generated_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "totalRecords": len(rows),
            "summaryRecords": len(summary),
        },
    }


def generate_report(request: ReportRequest, directory: CustomerDirectory) -> dict[str, Any]:
    """Run the full report pipeline.

    Errors while fetching the order list propagate; per-order enrichment
    errors only degrade the affected row.
    """
    logger.info(
        "Generating report %s..%s metric=%s customer=%s",
        request.start, request.end, request.metric.value, request.customer_id,
    )
    orders = fetch_fulfilled_orders(request.start_at, request.end_at, request.customer_id)

    rows = []
    for order in orders:
        enrichment = enrich_order(order)
        rows.append(build_report_row(order, enrichment, directory))

    degraded = sum(1 for r in rows if r.enrichment_status is not EnrichmentStatus.FULL)
    if degraded:
        logger.warning("%d of %d order(s) enriched with degraded data", degraded, len(rows))

    report = build_report(rows, request)
    logger.info(
        "Report generated: %d order(s), %d group(s), revenue %.2f",
        report["analytics"]["totalOrders"],
        len(report["summary"]),
        report["analytics"]["totalRevenue"],
    )
    return report
