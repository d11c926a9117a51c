"""HTTP-shaped read endpoints."""

from .app import create_app
from .handlers import handle_get_forms, handle_get_submissions

__all__ = ["create_app", "handle_get_forms", "handle_get_submissions"]
