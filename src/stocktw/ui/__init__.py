"""Web front end for the StockTW dashboard."""

from .app import create_app, format_number

__all__ = ["create_app", "format_number"]
