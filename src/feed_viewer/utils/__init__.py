"""Utility helpers for feed viewer."""

from .logging import setup_logging

__all__ = ["setup_logging"]
