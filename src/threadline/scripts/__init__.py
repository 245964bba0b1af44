"""Operational scripts: migrations, database bootstrap and seed data."""
