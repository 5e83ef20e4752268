"""Task service: CRUD over task records stored in redis."""

__version__ = "0.1.0"
