"""
CLI commands for the Letter Boxed overlay.
"""

from .show import app, fetch, layout, render

__all__ = [
    "app",
    "fetch",
    "layout",
    "render",
]
