"""Handler layer for the engine boundary.

This layer contains the request/response handlers. Handlers depend on
services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (DTOs)  -> (Business) -> (Data Access)
"""

from .search_handler import SearchHandler

__all__ = [
    "SearchHandler",
]
