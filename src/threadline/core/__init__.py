# src/threadline/core/__init__.py
"""Configuration, errors and security primitives."""
