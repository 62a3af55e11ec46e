"""Service modules for the medical records application."""

__all__ = ["records"]
