"""Tests for the click CLI in main.py."""

from __future__ import annotations

from unittest.mock import patch

from click.testing import CliRunner

from api.exceptions import ShopifyAPIError
from main import cli


def _report(summary: list[dict]) -> dict:
    return {
        "summary": summary,
        "detail": [],
        "analytics": {
            "totalRevenue": sum(g["amount"] for g in summary),
            "totalOrders": sum(g["orders"] for g in summary),
            "uniqueCustomers": len(summary),
            "avgProfitMargin": 12.5,
        },
        "metadata": {},
    }


def test_report_prints_summary() -> None:
    group = {
        "customer": "acme@example.com",
        "month": "2024-01",
        "orders": 2,
        "amount": 220.0,
        "profit_margin": 12.5,
    }
    with patch("services.report_service.generate_report", return_value=_report([group])) as gen:
        result = CliRunner().invoke(
            cli, ["report", "--start", "2024-01-01", "--end", "2024-02-01", "--metric", "actual"]
        )

    assert result.exit_code == 0, result.output
    assert "acme@example.com" in result.output
    assert "$220.00" in result.output
    request = gen.call_args[0][0]
    assert request.metric.value == "actual"


def test_report_rejects_bad_dates() -> None:
    with patch("services.report_service.generate_report") as gen:
        result = CliRunner().invoke(cli, ["report", "--start", "nope", "--end", "2024-02-01"])

    assert result.exit_code != 0
    assert "Invalid date format" in result.output
    gen.assert_not_called()


def test_report_requires_credentials(test_settings) -> None:
    test_settings.shop_domain = ""
    result = CliRunner().invoke(cli, ["report", "--start", "2024-01-01", "--end", "2024-02-01"])
    assert result.exit_code != 0
    assert "SHOP_DOMAIN" in result.output


def test_seed_metafields() -> None:
    seeded = [
        {
            "order_id": 1,
            "order_name": "#1001",
            "additional_charges": 15.5,
            "actual_total_checkout_price": 45.0,
        }
    ]
    with patch("services.metafield_seeder.seed_sample_metafields", return_value=seeded) as seed:
        result = CliRunner().invoke(cli, ["seed-metafields", "--count", "1"])

    assert result.exit_code == 0, result.output
    assert "#1001" in result.output
    assert "Seeded 1 order(s)." in result.output
    seed.assert_called_once_with(1)


def test_seed_metafields_upstream_error() -> None:
    with patch(
        "services.metafield_seeder.seed_sample_metafields",
        side_effect=ShopifyAPIError("forbidden", status_code=403),
    ):
        result = CliRunner().invoke(cli, ["seed-metafields"])

    assert result.exit_code != 0
    assert "Error populating metafields" in result.output
