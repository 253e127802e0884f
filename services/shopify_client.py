"""Shopify Admin API access (REST and GraphQL).

Every call goes through a single process-wide :class:`RequestGate` so the
report pipeline, listings, debug endpoints and the seeding command share
one upstream budget.  Failures are raised as :class:`ShopifyAPIError`
carrying the upstream status code and ``errors`` payload; nothing is
retried here.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import requests

from api.exceptions import ShopifyAPIError
from config import settings
from services.rate_limit import RequestGate

logger = logging.getLogger(__name__)

_gate: RequestGate | None = None
_gate_lock = threading.Lock()


def get_gate() -> RequestGate:
    """Return the shared request gate, building it from settings on first use."""
    global _gate  # noqa: PLW0603
    with _gate_lock:
        if _gate is None:
            _gate = RequestGate(
                settings.upstream_requests_per_second,
                settings.upstream_burst,
            )
        return _gate


def reset_gate() -> None:
    """Drop the shared gate so the next call rebuilds it from settings."""
    global _gate  # noqa: PLW0603
    with _gate_lock:
        _gate = None


def order_gid(order_id: int | str) -> str:
    return f"gid://shopify/Order/{order_id}"


def customer_gid(customer_id: int | str) -> str:
    return f"gid://shopify/Customer/{customer_id}"


def _base_url() -> str:
    return f"https://{settings.shop_domain}/admin/api/{settings.shopify_api_version}/"


def _headers() -> dict[str, str]:
    return {
        "X-Shopify-Access-Token": settings.shopify_access_token,
        "Content-Type": "application/json",
    }


def _error_payload(response: requests.Response) -> Any:
    """Extract the ``errors`` member of an upstream error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict) and "errors" in body:
        return body["errors"]
    return body


def _send(method: str, path: str, **kwargs: Any) -> dict:
    """Send one gated request and return the decoded JSON body."""
    url = _base_url() + path
    get_gate().acquire()
    logger.debug("Shopify API request %s %s params=%s", method, path, kwargs.get("params"))

    try:
        response = requests.request(
            method,
            url,
            headers=_headers(),
            timeout=settings.upstream_timeout,
            **kwargs,
        )
        response.raise_for_status()
    except requests.HTTPError as exc:
        resp = exc.response
        details = _error_payload(resp) if resp is not None else None
        status = resp.status_code if resp is not None else None
        logger.warning(
            "Shopify API error %s %s: status=%s details=%s", method, path, status, details
        )
        raise ShopifyAPIError(str(exc), status_code=status, details=details) from exc
    except requests.RequestException as exc:
        logger.warning("Shopify API request failed %s %s: %s", method, path, exc)
        raise ShopifyAPIError(str(exc)) from exc

    logger.debug("Shopify API response %s %s: status=%s", method, path, response.status_code)
    try:
        return response.json()
    except ValueError as exc:
        raise ShopifyAPIError(
            f"Invalid JSON from Shopify for {path}", status_code=502
        ) from exc


def rest_get(path: str, params: dict[str, Any] | None = None) -> dict:
    """GET a REST Admin API resource, e.g. ``rest_get("orders.json", {...})``."""
    return _send("GET", path, params=params)


def rest_post(path: str, payload: dict[str, Any]) -> dict:
    """POST a JSON payload to a REST Admin API resource."""
    return _send("POST", path, json=payload)


def graphql_raw(query: str, variables: dict | None = None) -> dict:
    """Execute a GraphQL request and return the full response body."""
    body: dict = {"query": query}
    if variables is not None:
        body["variables"] = variables
    return _send("POST", "graphql.json", json=body)


def graphql_request(query: str, variables: dict | None = None) -> dict:
    """Execute a GraphQL request against the Shopify Admin API.

    Returns the ``data`` dict from the response.  GraphQL-level errors are
    raised as :class:`ShopifyAPIError` with the ``errors`` list as details.
    """
    result = graphql_raw(query, variables)

    if result.get("errors"):
        msg = f"GraphQL errors: {result['errors']}"
        raise ShopifyAPIError(msg, status_code=502, details=result["errors"])

    return result.get("data") or {}
