"""API routers."""

from . import backups

__all__ = ["backups"]
