"""Crate Query CLI package."""

__version__ = "1.0.0"
