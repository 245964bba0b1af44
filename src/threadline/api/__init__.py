# src/threadline/api/__init__.py
"""HTTP API packages."""
