"""Core (UI-agnostic) GitHub usage report logic.

This package contains:
- CSV format detection and per-layout line parsing
- report building (sorted lines, date span, format class)
- the report session (facets, filters, value mode, subscriptions)
- SKU display labels and usage summaries (JSON-serializable payloads)
"""
