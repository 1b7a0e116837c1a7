"""
Client-side list screen state: filters, page window, rows and load status.

One controller backs one list screen. Every fetch takes a generation number;
a response that arrives after a newer fetch was issued is dropped, so a slow
earlier request can never overwrite the rows of a later one.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from fleet.config import settings
from fleet.services.query import NO_RECORDS_MESSAGE, ListSpec, Page, QueryError, run_list

logger = logging.getLogger("fleet.lists")

DEFAULT_ERROR_MESSAGE = "Failed to load records. Please try again."


class ListState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


@dataclass(frozen=True)
class ListRequest:
    criteria: dict[str, Any] = field(default_factory=dict)
    page: int = 0
    per_page: int = 10


Fetcher = Callable[[ListRequest], Awaitable[Page]]


class ListController:
    def __init__(
        self,
        fetch: Fetcher,
        per_page: int | None = None,
        refetch_on_clear: bool = False,
        error_message: str = DEFAULT_ERROR_MESSAGE,
    ):
        self._fetch = fetch
        self._generation = 0
        self.refetch_on_clear = refetch_on_clear
        self.error_message = error_message

        self.criteria: dict[str, Any] = {}
        self.page = 0
        self.per_page = settings.default_page_size if per_page is None else per_page
        self._check_page_size(self.per_page)

        self.state = ListState.IDLE
        self.rows: list = []
        self.total: int | None = None
        self.has_more = False
        self.error: str | None = None
        self.info: str | None = None

    @property
    def loading(self) -> bool:
        return self.state == ListState.LOADING

    @staticmethod
    def _check_page_size(per_page: int):
        if per_page not in settings.page_size_options:
            options = ", ".join(str(o) for o in settings.page_size_options)
            raise QueryError(f"per_page must be one of: {options}")

    def set_filter(self, name: str, value: Any):
        """Stage a filter value; nothing is fetched until ``apply_filters``."""
        self.criteria[name] = value

    async def refresh(self) -> bool:
        """Fetch the current window. Returns False when the result was not applied."""
        self._generation += 1
        generation = self._generation
        self.state = ListState.LOADING
        self.error = None
        request = ListRequest(criteria=dict(self.criteria), page=self.page, per_page=self.per_page)

        try:
            result = await self._fetch(request)
        except Exception:
            if generation != self._generation:
                logger.debug("Dropping failure of superseded fetch %d", generation)
                return False
            logger.exception("List fetch failed")
            # Rows from the last successful fetch stay on screen.
            self.error = self.error_message
            self.info = None
            self.state = ListState.ERRORED
            return False

        if generation != self._generation:
            logger.debug("Dropping stale response of fetch %d (latest %d)", generation, self._generation)
            return False

        self.rows = list(result.items)
        self.total = result.total
        self.has_more = result.has_more
        self.info = NO_RECORDS_MESSAGE if not self.rows else None
        self.state = ListState.LOADED
        return True

    async def apply_filters(self) -> bool:
        self.page = 0
        return await self.refresh()

    async def clear_filters(self) -> bool:
        self.criteria = {}
        self.page = 0
        if self.refetch_on_clear:
            return await self.refresh()
        return False

    async def change_page(self, page: int) -> bool:
        if page < 0:
            raise QueryError("Page must be zero or greater")
        self.page = page
        return await self.refresh()

    async def change_page_size(self, per_page: int) -> bool:
        self._check_page_size(per_page)
        self.per_page = per_page
        self.page = 0
        return await self.refresh()


def store_fetcher(session_factory, ctx, spec: ListSpec) -> Fetcher:
    """Fetcher that runs ``run_list`` against a SQLAlchemy session factory off the event loop."""

    def _run(request: ListRequest) -> Page:
        with session_factory() as db:
            return run_list(db, ctx, spec, request.criteria, request.page, request.per_page)

    async def fetch(request: ListRequest) -> Page:
        return await asyncio.to_thread(_run, request)

    return fetch
