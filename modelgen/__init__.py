"""Visitor-based source generation from namespaced model files."""

__version__ = "0.1.0"
