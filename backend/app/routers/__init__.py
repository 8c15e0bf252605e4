"""Routers subpackage — HTTP layer."""

from app.routers import iris

__all__ = ["iris"]
