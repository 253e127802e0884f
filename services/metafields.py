"""Parsing of the billing metafields stored on Shopify orders.

Two keys drive the report: ``additional_charges`` (added to the fulfilled
line-item total to get the billed amount) and
``actual_total_checkout_price`` (what the order actually cost).  Values
arrive in one of three shapes:

* a money JSON object, ``{"amount": 15.5, "currency_code": "USD"}``
* a plain number, ``"15.5"``
* free text, ``"shipping 10 + handling 5.50"``
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from config import settings

ADDITIONAL_CHARGES_KEY = "additional_charges"
ACTUAL_TOTAL_KEY = "actual_total_checkout_price"

_NUMBER_RE = re.compile(r"[-+]?[0-9]*\.?[0-9]+")
_DECIMAL_RE = re.compile(r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")


def find_metafield(metafields: list[dict] | None, key: str) -> dict | None:
    """Return the first metafield for ``key`` in the configured namespace.

    Matches either ``namespace == <ns> and key == key`` or a fully qualified
    ``key == "<ns>.<key>"``.
    """
    namespace = settings.metafield_namespace
    qualified = f"{namespace}.{key}"
    for field in metafields or []:
        ns = field.get("namespace") or ""
        k = field.get("key") or ""
        if (ns == namespace and k == key) or k == qualified:
            return field
    return None


def _to_number(value: Any) -> float | None:
    """Strict numeric conversion: blank -> 0, non-numeric -> None."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return 0.0
    if not _DECIMAL_RE.fullmatch(text):
        return None
    return float(text)


def parse_money_value(value: Any) -> float | None:
    """Return the numeric value of a money JSON object or plain number."""
    if isinstance(value, str) and value.startswith("{"):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict) and parsed.get("amount"):
            amount = _to_number(parsed["amount"])
            if amount is not None:
                return amount
    return _to_number(value)


def parse_additional_charges(metafields: list[dict] | None) -> float:
    """Additional charges for an order, 0 when absent.

    Free text values contribute the sum of every number found in them.
    """
    field = find_metafield(metafields, ADDITIONAL_CHARGES_KEY)
    if field is None:
        return 0.0

    value = field.get("value")
    number = parse_money_value(value)
    if number is not None:
        return number

    matches = _NUMBER_RE.findall(str(value))
    return float(sum(float(m) for m in matches))


def parse_actual_total(metafields: list[dict] | None) -> float:
    """Actual checkout total for an order, 0 when absent or unparseable."""
    field = find_metafield(metafields, ACTUAL_TOTAL_KEY)
    if field is None:
        return 0.0
    number = parse_money_value(field.get("value"))
    return number if number is not None else 0.0
