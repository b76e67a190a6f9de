"""API package for the Inclusive Hiring marketplace."""

from .main import app, create_app

__all__ = ["app", "create_app"]
