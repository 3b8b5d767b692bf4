"""Checkout flow: which storefront modal is currently visible.

State Machine (5 states, cyclic, initial BROWSING):
    BROWSING → CART_OPEN → CHECKOUT_OPEN → CONFIRMATION_OPEN → BROWSING
    CART_OPEN → BROWSING, CHECKOUT_OPEN → BROWSING (close buttons)
    BROWSING ⇄ ORDER_HISTORY_OPEN

Checkout can only be entered with a non-empty cart. Confirming the checkout
always ends on the confirmation modal, whether or not the order was saved; the
Confirmation records which of the two happened.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ValidationError

from ordering.cart.store import CartStore
from ordering.checkout.submission import OrderSubmissionService, OrderSummary, SubmissionResult

logger = structlog.get_logger(__name__)


class FlowState(Enum):
    BROWSING = "Browsing"
    CART_OPEN = "CartOpen"
    CHECKOUT_OPEN = "CheckoutOpen"
    CONFIRMATION_OPEN = "ConfirmationOpen"
    ORDER_HISTORY_OPEN = "OrderHistoryOpen"


_VALID_TRANSITIONS = {
    FlowState.BROWSING: {FlowState.CART_OPEN, FlowState.ORDER_HISTORY_OPEN},
    FlowState.CART_OPEN: {FlowState.BROWSING, FlowState.CHECKOUT_OPEN},
    FlowState.CHECKOUT_OPEN: {FlowState.BROWSING, FlowState.CONFIRMATION_OPEN},
    FlowState.CONFIRMATION_OPEN: {FlowState.BROWSING},
    FlowState.ORDER_HISTORY_OPEN: {FlowState.BROWSING},
}


@dataclass(frozen=True)
class Confirmation:
    summary: OrderSummary
    result: SubmissionResult

    @property
    def persisted(self) -> bool:
        return self.result.persisted


class CheckoutFlow:
    """Gates cart → checkout → confirmation for one storefront session.

    `identity` is anything exposing the current `user_id` (normally the
    session's IdentityContext); it is read at the moment the order is confirmed.
    """

    def __init__(self, cart_store: CartStore, submission: OrderSubmissionService, identity) -> None:
        self.cart_store = cart_store
        self.submission = submission
        self.identity = identity
        self.state = FlowState.BROWSING
        self.confirmation: Confirmation | None = None

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: FlowState) -> None:
        if target not in _VALID_TRANSITIONS[self.state]:
            raise ValidationError({"state": [f"Cannot transition from {self.state.value} to {target.value}"]})

    def _transition(self, target: FlowState) -> None:
        self._assert_can_transition(target)
        logger.debug("Checkout flow transition", from_state=self.state.value, to_state=target.value)
        self.state = target

    def _assert_cart_not_empty(self) -> None:
        if self.cart_store.is_empty():
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

    # -------------------------------------------------------------------
    # Cart modal
    # -------------------------------------------------------------------
    def open_cart(self) -> None:
        self._transition(FlowState.CART_OPEN)

    def close_cart(self) -> None:
        self._transition(FlowState.BROWSING)

    # -------------------------------------------------------------------
    # Checkout modal
    # -------------------------------------------------------------------
    def proceed_to_checkout(self) -> None:
        """Close the cart and open the checkout form."""
        self._assert_can_transition(FlowState.CHECKOUT_OPEN)
        self._assert_cart_not_empty()
        self._transition(FlowState.CHECKOUT_OPEN)

    def close_checkout(self) -> None:
        self._transition(FlowState.BROWSING)

    def confirm_order(self, full_name: str, email: str, shipping_address: str = "") -> Confirmation:
        """Submit the checkout form and move to the confirmation modal."""
        self._assert_can_transition(FlowState.CONFIRMATION_OPEN)

        errors = {}
        if not (full_name or "").strip():
            errors["full_name"] = ["Full name is required"]
        if not (email or "").strip():
            errors["email"] = ["Email address is required"]
        if errors:
            raise ValidationError(errors)
        self._assert_cart_not_empty()

        summary = OrderSummary(
            full_name=full_name.strip(),
            email=email.strip(),
            total=self.cart_store.totals().total_price,
            shipping_address=(shipping_address or "").strip(),
        )
        result = self.submission.submit(self.cart_store.snapshot(), self.identity.user_id, summary)

        self.confirmation = Confirmation(summary=summary, result=result)
        self._transition(FlowState.CONFIRMATION_OPEN)

        logger.info(
            "Checkout confirmed",
            persisted=result.persisted,
            order_id=str(result.order.id) if result.order else None,
            order_total=summary.total,
        )
        return self.confirmation

    # -------------------------------------------------------------------
    # Confirmation modal
    # -------------------------------------------------------------------
    def close_confirmation(self) -> None:
        self._transition(FlowState.BROWSING)
        self.confirmation = None

    # -------------------------------------------------------------------
    # Order history modal
    # -------------------------------------------------------------------
    def open_history(self) -> None:
        self._transition(FlowState.ORDER_HISTORY_OPEN)

    def close_history(self) -> None:
        self._transition(FlowState.BROWSING)
