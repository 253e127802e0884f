"""Custom exception classes for structured API error handling."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base application error with an associated HTTP status code."""

    status_code: int = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)


class ValidationError(AppError):
    status_code = 400


class ShopifyAPIError(AppError):
    """An upstream Shopify call failed.

    ``status_code`` is the upstream HTTP status when a response was received,
    otherwise 500.  ``details`` holds the upstream ``errors`` payload if any.
    """

    def __init__(
        self,
        message: str = "Shopify request failed",
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code or 500
        self.details = details
