"""API routers."""

from . import auth, pages, stats

__all__ = ["auth", "pages", "stats"]
