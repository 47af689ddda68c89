"""
Public façade for the *utils* package.

Internal helpers live in their own modules and are **not** re-exported.
"""

from __future__ import annotations

from .fs import atomic_write_text

__all__ = ["atomic_write_text"]
