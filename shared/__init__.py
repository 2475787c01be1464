"""Shared constants used by both the domain layer and infrastructure adapters.

This package provides a dependency-free location for constants that need to be
shared across packages without creating circular imports.
"""

from __future__ import annotations
