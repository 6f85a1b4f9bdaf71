"""Configuration module for feed viewer."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
