"""Utility modules for API-specific functionality.

- **responses**: High-performance JSON response class using orjson
"""
