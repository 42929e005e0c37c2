"""Teapot - feature-aware build orchestrator for native C packages."""

__version__ = "0.1.0"
