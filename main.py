"""CLI entry point for the Shopify billing report service."""

from __future__ import annotations

import click

from config import ConfigError, configure_logging, settings


def _require_shopify() -> None:
    try:
        settings.require_shopify()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
def cli() -> None:
    """Shopify billing report service."""
    configure_logging(settings.log_level)


@cli.command()
def serve() -> None:
    """Start the Flask API server."""
    _require_shopify()
    from api.app import create_app

    app = create_app()
    app.run(
        host=settings.server_host,
        port=settings.server_port,
        debug=settings.server_debug,
    )


@cli.command()
@click.option("--start", required=True, help="Start timestamp (ISO 8601).")
@click.option("--end", required=True, help="End timestamp (ISO 8601).")
@click.option(
    "--metric",
    type=click.Choice(["billing", "actual"]),
    default="billing",
    show_default=True,
    help="Amount summed per group.",
)
@click.option("--customer-id", default=None, help="Restrict to one Shopify customer.")
def report(start: str, end: str, metric: str, customer_id: str | None) -> None:
    """Print the monthly revenue report for a date range."""
    from api.exceptions import AppError
    from services.customer_directory import CustomerDirectory
    from services.report_service import generate_report, parse_report_request

    _require_shopify()
    try:
        request = parse_report_request(
            {"start": start, "end": end, "metric": metric, "customerId": customer_id}
        )
        directory = CustomerDirectory.load(settings.customer_directory_path)
        result = generate_report(request, directory)
    except AppError as exc:
        raise click.ClickException(str(exc)) from exc

    analytics = result["analytics"]
    print(f"Revenue Report ({metric}): {start} to {end}")
    print("=" * 80)
    print(f"  Orders:        {analytics['totalOrders']}")
    print(f"  Customers:     {analytics['uniqueCustomers']}")
    print(f"  Revenue:       ${analytics['totalRevenue']:,.2f}")
    print(f"  Avg Margin:    {analytics['avgProfitMargin']:.2f}%")

    if not result["summary"]:
        print("\nNo fulfilled orders in this date range.")
        return

    print(f"\n{'Month':<8} {'Customer':<36} {'Orders':>6} {'Amount':>12} {'Margin':>8}")
    print("-" * 80)
    for group in result["summary"]:
        print(
            f"{group['month']:<8} "
            f"{group['customer']:<36} "
            f"{group['orders']:>6} "
            f"${group['amount']:>11,.2f} "
            f"{group['profit_margin']:>7.2f}%"
        )


@cli.command("seed-metafields")
@click.option("--count", default=5, show_default=True, help="Number of recent orders to seed.")
def seed_metafields(count: int) -> None:
    """Write sample billing metafields onto recent orders."""
    from api.exceptions import ShopifyAPIError
    from services.metafield_seeder import seed_sample_metafields

    _require_shopify()
    try:
        seeded = seed_sample_metafields(count)
    except ShopifyAPIError as exc:
        raise click.ClickException(f"Error populating metafields: {exc}") from exc

    if not seeded:
        print("No orders found to populate metafields")
        return

    for row in seeded:
        print(
            f"  {row['order_name']} ({row['order_id']}): "
            f"additional_charges={row['additional_charges']:.2f} "
            f"actual_total_checkout_price={row['actual_total_checkout_price']:.2f}"
        )
    print(f"\nSeeded {len(seeded)} order(s).")


if __name__ == "__main__":
    cli()
