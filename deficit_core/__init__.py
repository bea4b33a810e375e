"""Core (UI-agnostic) deficit dashboard logic.

This package contains:
- the static deficit record store (records -> pandas)
- view parameter normalization and location filters
- column definitions, sort and aggregation stages
- the view assembler (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
