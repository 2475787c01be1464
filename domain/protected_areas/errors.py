"""Protected Areas Bounded Context - Error Hierarchy.

Input problems raise ``domain.errors.ValidationError``; this module holds the
errors raised on behalf of upstream registries.
"""

from __future__ import annotations

from domain.errors import DomainError


class UpstreamError(DomainError):
    """An upstream registry call failed.

    Attributes:
        status: HTTP status code, or 0 for timeout / network failure
        origin: Identity of the upstream service (base URL or short name)
    """

    def __init__(self, message: str, status: int = 0, origin: str = "") -> None:
        self.status = status
        self.origin = origin
        super().__init__(message)
