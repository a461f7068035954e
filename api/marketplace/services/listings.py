"""Creates, edits and deletes listings on behalf of a user."""
from __future__ import annotations

from logging import getLogger
from typing import Any

from marketplace.errors import AuthError, ListingNotFoundError, UnauthorizedEdit
from marketplace.models.listing import Listing, ListingDraft, ListingPatch
from marketplace.models.user import User
from marketplace.stores.listing_store import AsyncFirestoreListingStore

logger = getLogger(__name__)


def _require_user(user: User | None) -> User:
    if user is None:
        raise AuthError("NOT_SIGNED_IN", "You must be logged in to manage listings")
    return user


def ensure_owner(user: User | None, listing: Listing) -> User:
    """
    Check that the user owns the listing.

    :raises AuthError: If no user is signed in.
    :raises UnauthorizedEdit: If the listing belongs to someone else.
    """
    user = _require_user(user)
    if not listing.is_owned_by(user.uid):
        logger.warning("User %s attempted to modify listing %s owned by %s", user.uid, listing.id, listing.owner_id)
        raise UnauthorizedEdit(listing.id, user.uid)
    return user


class ListingService:
    """
    Validated, ownership-checked listing operations.

    Validation and ownership are checked before the store is called, so a rejected operation never reaches it.
    """

    def __init__(self, store: AsyncFirestoreListingStore):
        self.store = store

    async def create_listing(self, user: User | None, data: dict[str, Any]) -> str:
        """
        Create a listing owned by the user.

        :param user: The signed-in user.
        :param data: Raw title, description and price.
        :return: The ID of the new listing.
        """
        user = _require_user(user)
        draft = ListingDraft.parse(data)
        return await self.store.insert(draft, owner_id=user.uid)

    async def get_listing(self, listing_id: str) -> Listing | None:
        return await self.store.get_by_id(listing_id)

    async def load_owned_listing(self, user: User | None, listing_id: str) -> Listing:
        """
        Fetch a listing the user is about to change.

        :raises ListingNotFoundError: If the listing does not exist.
        :raises UnauthorizedEdit: If the listing belongs to someone else.
        """
        user = _require_user(user)
        listing = await self.store.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        ensure_owner(user, listing)
        return listing

    async def update_listing(self, user: User | None, listing: Listing, data: dict[str, Any]) -> Listing:
        """
        Change the title, description and/or price of a listing.

        :param user: The signed-in user, who must own the listing.
        :param listing: The listing as last fetched.
        :param data: The fields to change.
        :return: The listing with the changes applied.
        """
        ensure_owner(user, listing)
        patch = ListingPatch.parse(data)
        await self.store.update(listing.id, patch)
        return listing.copy(update=patch.to_firestore())

    async def delete_listing(self, user: User | None, listing: Listing) -> None:
        """
        Delete a listing.

        :param user: The signed-in user, who must own the listing.
        :param listing: The listing as last fetched.
        """
        ensure_owner(user, listing)
        await self.store.delete(listing.id)

    async def get_owned_listings(self, user: User | None) -> list[Listing]:
        """Return the listings created by the user, newest first."""
        user = _require_user(user)
        return await self.store.list_by_owner(user.uid)
