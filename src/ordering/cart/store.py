"""Cart store: the single mutation entry point for a session's cart.

Presentation code never touches the Cart aggregate directly. It calls the
store, and the store tells every subscriber what changed once the mutation is
complete, passing the event together with freshly computed totals.
"""

from collections.abc import Callable

import structlog

from ordering.cart.cart import Cart, CartTotals

logger = structlog.get_logger(__name__)

CartListener = Callable[[object, CartTotals], None]


class CartStore:
    """Owns one Cart and broadcasts its changes."""

    def __init__(self, cart: Cart | None = None) -> None:
        self.cart = cart or Cart.create()
        self._listeners: list[CartListener] = []

    # -------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------
    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        events = self.cart.drain_events()

        totals = self.cart.totals()
        for event in events:
            for listener in list(self._listeners):
                try:
                    listener(event, totals)
                except Exception as exc:
                    logger.error(
                        "Cart listener failed",
                        listener=getattr(listener, "__name__", repr(listener)),
                        cart_event=event.__class__.__name__,
                        error=str(exc),
                    )

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_to_cart(self, product_id, name, unit_price) -> CartTotals:
        self.cart.add_to_cart(product_id, name, unit_price)
        self._publish()
        return self.cart.totals()

    def remove_one(self, product_id) -> CartTotals:
        self.cart.remove_one(product_id)
        self._publish()
        return self.cart.totals()

    def clear(self) -> CartTotals:
        self.cart.clear()
        self._publish()
        logger.debug("Cart cleared", cart_id=str(self.cart.id))
        return self.cart.totals()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def totals(self) -> CartTotals:
        return self.cart.totals()

    def snapshot(self) -> list[dict]:
        return self.cart.snapshot()

    @property
    def lines(self):
        return list(self.cart.lines)

    def is_empty(self) -> bool:
        return self.totals().total_items == 0
