"""
Courier Service package.

This module provides a FastAPI application exposing two REST endpoints:
file sharing with optional format conversion (`POST /shares/files`) and
shipping quotes between two cities (`GET /shipping/calculate`).
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
