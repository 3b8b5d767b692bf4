"""Order history: a visitor's past orders, newest first.

Every open re-fetches; nothing is cached. Opens and closes each start a new
generation, and a response is only applied if its generation is still the
current one, so a slow fetch from an earlier open can never overwrite the
result of a later one.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

import structlog
from protean.utils.globals import current_domain

from ordering.order.order import Order
from shared.errors import OrderReadError

logger = structlog.get_logger(__name__)

HISTORY_ERROR_MESSAGE = "Failed to load order history. Please try again."


class HistoryStatus(Enum):
    LOADING = "Loading"
    ERROR = "Error"
    LOADED = "Loaded"


@dataclass(frozen=True)
class HistoryView:
    status: HistoryStatus
    orders: tuple = field(default_factory=tuple)
    message: str | None = None
    signed_in: bool = True

    @classmethod
    def loading(cls) -> "HistoryView":
        return cls(status=HistoryStatus.LOADING)

    @classmethod
    def loaded(cls, orders, signed_in: bool = True) -> "HistoryView":
        return cls(status=HistoryStatus.LOADED, orders=tuple(orders), signed_in=signed_in)

    @classmethod
    def error(cls, message: str = HISTORY_ERROR_MESSAGE) -> "HistoryView":
        return cls(status=HistoryStatus.ERROR, message=message)


async def load_order_history(user_id: str) -> list[Order]:
    """Read a user's orders from the order store.

    The repository call blocks, so it runs on a worker thread.
    """
    try:
        repository = current_domain.repository_for(Order)
        return await asyncio.to_thread(repository.history_for, user_id)
    except Exception as exc:
        raise OrderReadError(str(exc)) from exc


class OrderHistoryReader:
    def __init__(self, fetch: Callable[[str], Awaitable[list[Order]]] = load_order_history) -> None:
        self._fetch = fetch
        self._generation = 0
        self.view = HistoryView.loaded([], signed_in=False)

    @property
    def generation(self) -> int:
        return self._generation

    async def open(self, user_id: str | None) -> HistoryView:
        self._generation += 1
        generation = self._generation

        if not user_id:
            self.view = HistoryView.loaded([], signed_in=False)
            return self.view

        self.view = HistoryView.loading()
        try:
            orders = await self._fetch(user_id)
        except Exception as exc:
            logger.error("Error fetching order history", user_id=user_id, error=str(exc))
            if generation == self._generation:
                self.view = HistoryView.error()
            return self.view

        if generation != self._generation:
            logger.debug(
                "Discarding stale order history response",
                user_id=user_id,
                generation=generation,
                current_generation=self._generation,
            )
            return self.view

        self.view = HistoryView.loaded(orders)
        return self.view

    def close(self) -> None:
        """Invalidate any fetch still in flight."""
        self._generation += 1
