"""Restaurant API - CRUD service for restaurant records backed by SQLite."""

__version__ = "0.1.0"
