from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from logging import Logger

import google.api_core.exceptions
import google.cloud.firestore
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from marketplace.errors import StoreError, ValidationError
from marketplace.models.listing import Listing, ListingDraft, ListingPatch

# errors worth another attempt on reads; anything else surfaces immediately
TRANSIENT_ERRORS = (
    google.api_core.exceptions.ServiceUnavailable,
    google.api_core.exceptions.DeadlineExceeded,
)

retry_transient = retry(
    retry=retry_if_exception_type(TRANSIENT_ERRORS),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, max=4),
    reraise=True,
)


@dataclass(frozen=True)
class PageCursor:
    """Marks the last listing of a page so the next page can resume strictly after it."""

    listing_id: str
    created_at: datetime

    @classmethod
    def from_listing(cls, listing: Listing) -> PageCursor:
        return cls(listing_id=listing.id, created_at=listing.created_at)

    def encode(self) -> str:
        """Returns the cursor as an URL-safe token."""
        payload = json.dumps({"id": self.listing_id, "created_at": self.created_at.isoformat()})
        return base64.urlsafe_b64encode(payload.encode()).decode()

    @classmethod
    def decode(cls, token: str) -> PageCursor:
        """
        Returns the cursor from a token produced by :meth:`encode`.

        :raises ValidationError: If the token is malformed.
        """
        try:
            payload = json.loads(base64.urlsafe_b64decode(token.encode()))
            return cls(listing_id=payload["id"], created_at=datetime.fromisoformat(payload["created_at"]))
        except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
            raise ValidationError("Invalid pagination cursor") from e


@dataclass
class ListingPage:
    """A page of listings and the cursor of its last item."""

    items: list[Listing] = field(default_factory=list)
    next_cursor: PageCursor | None = None


class AsyncFirestoreListingStore:
    """Asynchronous Firestore-backed store for marketplace listings."""

    def __init__(
        self,
        *,
        client: google.cloud.firestore.AsyncClient,
        collection: str,
        logger: Logger = logging.getLogger(__name__),
    ):
        """
        Initialize the AsyncFirestoreListingStore.

        :param client: The Firestore client shared by the application.
        :param collection: The Firestore collection name.
        :param logger: Logger instance.
        """
        self.collection = client.collection(collection)
        self._logger = logger

    @property
    def logger(self) -> Logger:
        """Lazy-loaded logger property."""
        if self._logger is None:
            self._logger = logging.getLogger(__name__)
        return self._logger

    def _ordered(self):
        return self.collection.order_by("createdAt", direction=google.cloud.firestore.Query.DESCENDING)

    def _to_listings(self, snapshots) -> list[Listing]:
        return [Listing.from_firestore(snapshot.id, snapshot.to_dict()) for snapshot in snapshots]

    async def insert(self, draft: ListingDraft, owner_id: str) -> str:
        """
        Add a listing. The store assigns its ID and creation time.

        :param draft: The validated listing fields.
        :param owner_id: The uid of the creating user.
        :return: The ID of the new listing.
        """
        try:
            _, doc_ref = await self.collection.add(
                draft.to_firestore(owner_id, google.cloud.firestore.SERVER_TIMESTAMP)
            )
        except google.api_core.exceptions.GoogleAPICallError as e:
            self.logger.error("Error creating listing for owner %s: %s", owner_id, e)
            raise StoreError("Failed to create listing.") from e

        self.logger.info("Created listing %s for owner %s", doc_ref.id, owner_id)
        return doc_ref.id

    async def get_by_id(self, listing_id: str) -> Listing | None:
        """
        Find a listing by ID.

        :param listing_id: The listing ID.
        :return: The listing, or None if no such listing exists.
        """
        try:
            snapshot = await self._get_snapshot(listing_id)
        except google.api_core.exceptions.GoogleAPICallError as e:
            self.logger.error("Error fetching listing %s: %s", listing_id, e)
            raise StoreError(f"Failed to fetch listing {listing_id}.") from e

        if not snapshot.exists:
            self.logger.debug("Listing %s does not exist", listing_id)
            return None
        return Listing.from_firestore(snapshot.id, snapshot.to_dict())

    @retry_transient
    async def _get_snapshot(self, listing_id: str):
        return await self.collection.document(listing_id).get()

    async def list_ordered_page(self, page_size: int, cursor: PageCursor | None = None) -> ListingPage:
        """
        Fetch one page of listings, newest first.

        :param page_size: The maximum number of listings to return.
        :param cursor: The cursor of the previous page's last listing, or None for the first page.
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")

        try:
            listings = await self._fetch_page(page_size, cursor)
        except google.api_core.exceptions.GoogleAPICallError as e:
            self.logger.error("Error fetching listings page after %s: %s", cursor, e)
            raise StoreError("Failed to load listings.") from e

        next_cursor = PageCursor.from_listing(listings[-1]) if listings else None
        return ListingPage(items=listings, next_cursor=next_cursor)

    @retry_transient
    async def _fetch_page(self, page_size: int, cursor: PageCursor | None) -> list[Listing]:
        query = self._ordered().limit(page_size)
        if cursor is not None:
            anchor = await self.collection.document(cursor.listing_id).get()
            if anchor.exists:
                query = query.start_after(anchor)
            else:
                # the anchor was deleted since the previous page; resume from its timestamp
                query = query.start_after({"createdAt": cursor.created_at})
        return self._to_listings(await query.get())

    async def list_all(self) -> list[Listing]:
        """
        Fetch every listing, newest first.

        This is a full collection scan and only suits small collections.
        """
        try:
            snapshots = await self._query(self._ordered())
        except google.api_core.exceptions.GoogleAPICallError as e:
            self.logger.error("Error fetching all listings: %s", e)
            raise StoreError("Failed to load listings.") from e
        return self._to_listings(snapshots)

    @retry_transient
    async def _query(self, query):
        return await query.get()

    async def list_by_owner(self, owner_id: str) -> list[Listing]:
        """
        Fetch the listings of one owner, newest first.

        :param owner_id: The uid of the owner.
        """
        try:
            snapshots = await self._query(self.collection.where("ownerId", "==", owner_id))
        except google.api_core.exceptions.GoogleAPICallError as e:
            self.logger.error("Error fetching listings of owner %s: %s", owner_id, e)
            raise StoreError("Failed to load listings.") from e
        # sorted here so the query needs no composite index
        return sorted(self._to_listings(snapshots), key=lambda listing: listing.created_at, reverse=True)

    async def update(self, listing_id: str, patch: ListingPatch) -> None:
        """
        Merge the supplied fields into a listing.

        :param listing_id: The listing ID.
        :param patch: The fields to change. Owner and creation time are never part of a patch.
        """
        fields = patch.to_firestore()
        if not fields:
            return

        try:
            await self.collection.document(listing_id).update(fields)
        except google.api_core.exceptions.GoogleAPICallError as e:
            self.logger.error("Error updating listing %s: %s", listing_id, e)
            raise StoreError(f"Failed to update listing {listing_id}.") from e

        self.logger.info("Updated listing %s fields %s", listing_id, sorted(fields))

    async def delete(self, listing_id: str) -> None:
        """
        Delete a listing.

        :param listing_id: The listing ID.
        """
        try:
            await self.collection.document(listing_id).delete()
        except google.api_core.exceptions.GoogleAPICallError as e:
            self.logger.error("Error deleting listing %s: %s", listing_id, e)
            raise StoreError(f"Failed to delete listing {listing_id}.") from e

        self.logger.info("Deleted listing %s", listing_id)
