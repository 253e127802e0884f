"""Customer, order and report endpoints."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from api.errors import handle_errors
from services.orders import fetch_fulfilled_orders, list_customers, parse_date_range
from services.report_service import generate_report, parse_report_request

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")


# ===========================================================================
# Customers
# ===========================================================================


@api_bp.route("/customers", methods=["GET"])
@handle_errors(failure_message="Failed to fetch customers")
def get_customers() -> tuple:
    """One page of customer ids; pass ``since_id`` for the next page."""
    since_id = request.args.get("since_id") or None
    logger.info("Fetching customers since_id=%s", since_id)
    return jsonify(list_customers(since_id)), 200


# ===========================================================================
# Orders
# ===========================================================================


@api_bp.route("/orders", methods=["GET"])
@handle_errors(failure_message="Failed to fetch orders")
def get_orders() -> tuple:
    """All shipped orders in a date range, optionally for one customer."""
    start = request.args.get("start")
    end = request.args.get("end")
    customer_id = request.args.get("customerId") or None

    start_at, end_at = parse_date_range(start, end)

    logger.info("Fetching fulfilled orders %s..%s customer=%s", start, end, customer_id)
    orders = fetch_fulfilled_orders(start_at, end_at, customer_id)

    return jsonify({
        "orders": orders,
        "count": len(orders),
        "dateRange": {"start": start, "end": end},
        "customerId": customer_id,
    }), 200


# ===========================================================================
# Report
# ===========================================================================


@api_bp.route("/report", methods=["POST"])
@handle_errors(failure_message="Failed to generate report")
def post_report() -> tuple:
    """Monthly revenue report grouped by customer."""
    report_request = parse_report_request(request.get_json(silent=True))
    directory = current_app.extensions["customer_directory"]
    report = generate_report(report_request, directory)
    return jsonify(report), 200
