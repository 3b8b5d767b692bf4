"""Order submission: turns a confirmed checkout into a persisted Order.

Submission fails closed: without an identity nothing is written. Any failure is
logged and handed back to the caller as part of the result rather than raised,
because the checkout flow always moves on to the confirmation screen and needs
to know whether the order was actually saved.
"""

import json
from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from ordering.cart.store import CartStore
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from shared.errors import OrderWriteError, StorefrontError, Unauthenticated

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderSummary:
    """What the visitor entered at checkout, plus the total they were shown."""

    full_name: str
    email: str
    total: float
    shipping_address: str = ""


@dataclass(frozen=True)
class SubmissionResult:
    order: Order | None = None
    error: StorefrontError | None = None

    @property
    def persisted(self) -> bool:
        return self.order is not None


class OrderSubmissionService:
    """Writes one order per submission and empties the cart on success."""

    def __init__(self, cart_store: CartStore) -> None:
        self.cart_store = cart_store

    def submit(self, cart_snapshot: list[dict], identity: str | None, summary: OrderSummary) -> SubmissionResult:
        if not identity:
            logger.error("User not authenticated, order not saved", order_total=summary.total)
            return SubmissionResult(error=Unauthenticated("No identity is available for this session"))

        try:
            order_id = current_domain.process(
                PlaceOrder(
                    user_id=identity,
                    order_total=summary.total,
                    items=json.dumps(cart_snapshot),
                ),
                asynchronous=False,
            )
            order = current_domain.repository_for(Order).get(order_id)
        except Exception as exc:
            logger.error(
                "Error saving order",
                user_id=identity,
                order_total=summary.total,
                error=str(exc),
            )
            return SubmissionResult(error=OrderWriteError(str(exc)))

        self.cart_store.clear()
        return SubmissionResult(order=order)
