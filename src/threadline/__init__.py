"""Threadline: a forum backend with posts, users and voting."""

__version__ = "0.1.0"
