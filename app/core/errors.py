# app/core/errors.py
from typing import List, Optional


class RecoError(Exception):
    """Base error for the recommendation service."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class ConfigurationError(RecoError):
    """Missing or invalid settings. Raised at construction time, never per request."""


class CatalogEmptyError(RecoError):
    """The product catalog has no entries (seeding problem, not a user state)."""


class InferenceError(RecoError):
    """The inference service failed or replied with nothing usable."""
