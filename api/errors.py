"""API error handling utilities."""

from __future__ import annotations

import functools
import logging
from typing import Any

from flask import jsonify

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    status_code: int,
    details: Any = None,
) -> tuple:
    """Return a consistent JSON error response."""
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status_code


def upstream_error_response(exc, failure_message: str) -> tuple:
    """Return the JSON body for a failed Shopify call, keeping its status."""
    body = {
        "error": exc.details if exc.details is not None else str(exc),
        "status": exc.status_code,
        "message": failure_message,
    }
    return jsonify(body), exc.status_code


def handle_errors(f=None, *, failure_message: str = "Shopify request failed"):
    """Decorator that catches common exceptions and returns JSON errors.

    Usable bare (``@handle_errors``) or with a route specific message for
    upstream failures (``@handle_errors(failure_message="...")``).
    """
    if f is None:
        return functools.partial(handle_errors, failure_message=failure_message)

    from api.exceptions import AppError, ShopifyAPIError

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ShopifyAPIError as exc:
            logger.warning("%s in %s: %s", failure_message, f.__name__, exc)
            return upstream_error_response(exc, failure_message)
        except AppError as exc:
            return error_response(str(exc), exc.status_code)
        except (SystemExit, KeyboardInterrupt):
            raise
        except Exception:
            logger.exception("Unexpected error in %s", f.__name__)
            return error_response("Internal server error", 500)

    return wrapper
