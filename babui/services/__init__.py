"""Adapters for services outside the database: object storage, geocoding, directions."""
