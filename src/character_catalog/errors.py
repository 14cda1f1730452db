from __future__ import annotations
from typing import Optional

NETWORK_ERROR_MESSAGE = (
    "A network error occurred while fetching characters. Please check your connection."
)

class CatalogError(Exception):
    """Base class for errors surfaced by the catalog."""

class RemoteError(CatalogError):
    """
    A page call failed: the API answered with a non-success status, or no
    response arrived at all (status_code is None then).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
