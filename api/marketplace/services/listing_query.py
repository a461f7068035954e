"""
Browse state for a listings view: paginated loading, keyword search and price sorting.

Search is a case-insensitive substring scan over the whole collection, fetched client-side. It is not indexed and
will not scale beyond a small collection; a warning is logged once a scan exceeds
``ListingsConfig.search_scan_warn_threshold`` listings.
"""
from __future__ import annotations

from enum import Enum
from logging import getLogger
from typing import Iterable, Protocol

from marketplace.config import ListingsConfig
from marketplace.errors import AuthError, StoreError, UnauthorizedEdit
from marketplace.models.listing import Listing
from marketplace.models.user import User
from marketplace.services.listings import ListingService
from marketplace.stores.listing_store import ListingPage, PageCursor

logger = getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load listings. Please try again."
SEARCH_FAILED_MESSAGE = "Search failed. Please try again."
DELETE_FAILED_MESSAGE = "Failed to delete listing. Please try again."


class QueryMode(str, Enum):
    PAGINATED = "paginated"
    SEARCHING = "searching"


class SortOrder(str, Enum):
    NONE = "none"
    PRICE_DESCENDING = "price_desc"
    PRICE_ASCENDING = "price_asc"


class ListingSource(Protocol):
    async def list_ordered_page(self, page_size: int, cursor: PageCursor | None = None) -> ListingPage:
        ...

    async def list_all(self) -> list[Listing]:
        ...


def sort_listings(listings: Iterable[Listing], order: SortOrder) -> list[Listing]:
    """Return a stably sorted copy of the listings. ``SortOrder.NONE`` keeps the given order."""
    if order is SortOrder.NONE:
        return list(listings)
    return sorted(listings, key=lambda listing: listing.price, reverse=order is SortOrder.PRICE_DESCENDING)


def filter_listings(listings: Iterable[Listing], term: str) -> list[Listing]:
    """Return the listings whose title or description contains the term, ignoring case."""
    needle = term.strip().lower()
    return [
        listing for listing in listings if needle in listing.title.lower() or needle in listing.description.lower()
    ]


class ListingQueryController:
    """
    Coordinates what a listings view shows.

    Every reset or mode switch bumps a generation counter. A response is only applied if the generation (and, for
    "load more", the cursor) it was requested under is still current, so a slow response cannot overwrite newer state.
    Store failures never propagate: ``error`` is set and the previously loaded listings are kept.
    """

    def __init__(
        self,
        store: ListingSource,
        *,
        listing_service: ListingService | None = None,
        page_size: int = ListingsConfig.page_size,
    ):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.store = store
        self.listing_service = listing_service
        self.page_size = page_size

        self.page: list[Listing] = []
        self.cursor: PageCursor | None = None
        self.has_more = True
        self.mode = QueryMode.PAGINATED
        self.search_term = ""
        self.sort_order = SortOrder.NONE
        self.error: str | None = None

        self.loading = False
        self.loading_more = False
        self.searching = False
        self._generation = 0
        self._loading_generation = 0

    @property
    def view(self) -> list[Listing]:
        """The loaded listings in the selected sort order."""
        return sort_listings(self.page, self.sort_order)

    def set_sort_order(self, order: SortOrder) -> None:
        self.sort_order = SortOrder(order)

    async def load_initial_page(self) -> bool:
        """
        Load the newest page of listings, replacing whatever is loaded.

        :return: True if the page was applied.
        """
        self._generation += 1
        generation = self._generation
        self.mode = QueryMode.PAGINATED
        self.loading = True
        self._loading_generation = generation
        try:
            result = await self.store.list_ordered_page(self.page_size, None)
        except StoreError as e:
            if generation == self._generation:
                self._fail(LOAD_FAILED_MESSAGE, e)
            return False
        finally:
            # only the newest initial load clears the flag, even if a search made it stale
            if generation == self._loading_generation:
                self.loading = False

        if generation != self._generation:
            logger.debug("Discarding stale initial page (generation %s)", generation)
            return False

        self.page = list(result.items)
        self._advance(result)
        self.error = None
        return True

    async def load_more(self) -> bool:
        """
        Append the next page of listings.

        Does nothing while searching, once the last page was loaded, or while another "load more" is in flight.

        :return: True if a page was appended.
        """
        if self.mode is not QueryMode.PAGINATED or not self.has_more or self.loading_more:
            return False

        generation, cursor = self._generation, self.cursor
        self.loading_more = True
        try:
            result = await self.store.list_ordered_page(self.page_size, cursor)
        except StoreError as e:
            if self._is_current(generation, cursor):
                self._fail(LOAD_FAILED_MESSAGE, e)
            return False
        finally:
            self.loading_more = False

        if not self._is_current(generation, cursor):
            logger.debug("Discarding stale page after cursor %s", cursor)
            return False

        self.page = [*self.page, *result.items]
        self._advance(result)
        self.error = None
        return True

    async def search(self, term: str) -> bool:
        """
        Show the listings whose title or description contains the term.

        A blank term clears the search. Does nothing while another search is in flight.

        :return: True if results were applied.
        """
        if not term.strip():
            return await self.clear_search()
        if self.searching:
            return False

        self._generation += 1
        generation = self._generation
        self.mode = QueryMode.SEARCHING
        self.search_term = term
        self.searching = True
        try:
            listings = await self.store.list_all()
        except StoreError as e:
            if generation == self._generation:
                self._fail(SEARCH_FAILED_MESSAGE, e)
            return False
        finally:
            self.searching = False

        if generation != self._generation:
            logger.debug("Discarding stale search results for %r", term)
            return False

        if len(listings) > ListingsConfig.search_scan_warn_threshold:
            logger.warning(
                "Search scanned %s listings; substring search over the full collection does not scale",
                len(listings),
            )

        self.page = filter_listings(listings, term)
        self.cursor = None
        self.has_more = False
        self.error = None
        return True

    async def clear_search(self) -> bool:
        """Leave search mode and go back to the first page of listings."""
        self.search_term = ""
        return await self.load_initial_page()

    async def refresh(self) -> bool:
        """Reload the current mode from the store."""
        if self.mode is QueryMode.SEARCHING and self.search_term.strip():
            return await self.search(self.search_term)
        return await self.load_initial_page()

    async def delete(self, user: User | None, listing: Listing) -> bool:
        """
        Delete a listing and resynchronize with the store.

        :param user: The signed-in user, who must own the listing.
        :param listing: The listing to delete.
        :return: True if the listing was deleted.
        """
        if self.listing_service is None:
            raise RuntimeError("ListingQueryController was created without a listing service")

        try:
            await self.listing_service.delete_listing(user, listing)
        except UnauthorizedEdit:
            self.error = "You can only delete your own listings"
            return False
        except AuthError:
            self.error = "You must be logged in to delete listings"
            return False
        except StoreError as e:
            self._fail(DELETE_FAILED_MESSAGE, e)
            return False

        if any(loaded.id == listing.id for loaded in self.page):
            await self.refresh()
        return True

    def _advance(self, result: ListingPage) -> None:
        self.cursor = result.next_cursor
        # a short page is taken as the last one; there is no count query to confirm it
        self.has_more = len(result.items) == self.page_size

    def _is_current(self, generation: int, cursor: PageCursor | None) -> bool:
        return generation == self._generation and cursor == self.cursor and self.mode is QueryMode.PAGINATED

    def _fail(self, message: str, error: Exception) -> None:
        logger.error("%s (%s)", message, error)
        self.error = message
