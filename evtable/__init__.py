"""Core (UI-agnostic) query engine for EV registration records.

This package contains:
- the field schema (categorical / numeric / identifier type tags)
- the record store (frozen records + pandas working frame)
- query parameter normalization
- the filter -> search -> sort -> paginate pipeline
- the facet index used to populate filter choices
- summary metrics and chart data (JSON-serializable payloads)
"""
