"""Exceptions shared by the stores, services and REST controllers."""
from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for all marketplace errors."""


class StoreError(MarketplaceError):
    """Exception raised when the document store fails (transport, permission or quota)."""


class ValidationError(MarketplaceError):
    """Exception raised when listing input fails client-side validation."""


class UnauthorizedEdit(MarketplaceError):
    """Exception raised when a user tries to change a listing they do not own."""

    def __init__(self, listing_id: str, uid: str | None):
        super().__init__(f"User {uid} is not the owner of listing {listing_id}")
        self.listing_id = listing_id
        self.uid = uid


class ListingNotFoundError(MarketplaceError):
    """Exception raised when an id-based operation targets a listing that does not exist."""

    def __init__(self, listing_id: str):
        super().__init__(f"Listing {listing_id} not found")
        self.listing_id = listing_id


class AuthError(MarketplaceError):
    """Exception raised when signing in, signing up or verifying a user fails."""

    def __init__(self, code: str, message: str | None = None):
        super().__init__(message or code)
        self.code = code
