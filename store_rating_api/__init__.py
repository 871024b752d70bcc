"""
Top‑level package for the Store Rating API.

This file makes ``store_rating_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``store_rating_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
