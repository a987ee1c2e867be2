"""Biotrackr health-data services: token refresh, ingestion and read APIs."""

__version__ = "0.1.0"
