"""Scanning pipelines: one-shot discovery and the cancellable background runner."""

from .background import BackgroundScanner
from .discovery import catalog_sort_key, order_entries, scan_directory

__all__ = ["BackgroundScanner", "catalog_sort_key", "order_entries", "scan_directory"]
