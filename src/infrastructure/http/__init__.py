"""HTTP transport shared by every registry adapter."""

from .client import HttpClient

__all__ = ["HttpClient"]
