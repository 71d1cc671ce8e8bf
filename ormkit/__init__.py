"""Helpers for building SQL query fragments and inspecting model values."""

__version__ = "0.1.0"
__all__ = ["utils"]