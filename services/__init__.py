"""Shopify access, order enrichment and report aggregation."""
