"""API route modules."""

from gzplan.api.routes import loans, plans

__all__ = ["loans", "plans"]
