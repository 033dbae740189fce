"""
Top-level package for the BI dashboard.

This package exposes the core filtering engine, ingestion, services and
the Dash UI. Most code should import from submodules such as:
    bi_dashboard.core
    bi_dashboard.services
    bi_dashboard.ui
"""

__all__: list[str] = []
