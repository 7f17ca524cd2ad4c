"""Personal finance tracking API: users, JWT auth and income/expense records."""

from .app import create_app

__all__ = ["create_app"]
