"""Tests for the checkout flow state machine."""

from types import SimpleNamespace

import pytest
from ordering.cart.store import CartStore
from ordering.checkout.flow import CheckoutFlow, FlowState
from ordering.checkout.submission import OrderSubmissionService
from protean.exceptions import ValidationError


@pytest.fixture
def identity():
    return SimpleNamespace(user_id="anon-123")


@pytest.fixture
def cart_store():
    store = CartStore()
    store.add_to_cart(1, "Mug", 10.0)
    return store


@pytest.fixture
def flow(cart_store, identity):
    return CheckoutFlow(cart_store, OrderSubmissionService(cart_store), identity)


def _to_checkout(flow):
    flow.open_cart()
    flow.proceed_to_checkout()


class TestInitialState:
    def test_starts_browsing(self, flow):
        assert flow.state == FlowState.BROWSING
        assert flow.confirmation is None

    def test_state_values(self):
        assert [state.value for state in FlowState] == [
            "Browsing",
            "CartOpen",
            "CheckoutOpen",
            "ConfirmationOpen",
            "OrderHistoryOpen",
        ]


class TestCartModal:
    def test_open_and_close_cart(self, flow):
        flow.open_cart()
        assert flow.state == FlowState.CART_OPEN
        flow.close_cart()
        assert flow.state == FlowState.BROWSING

    def test_cannot_open_cart_twice(self, flow):
        flow.open_cart()
        with pytest.raises(ValidationError) as exc_info:
            flow.open_cart()
        assert "state" in exc_info.value.messages

    def test_cannot_close_cart_while_browsing(self, flow):
        with pytest.raises(ValidationError):
            flow.close_cart()


class TestCheckoutModal:
    def test_proceed_to_checkout(self, flow):
        _to_checkout(flow)
        assert flow.state == FlowState.CHECKOUT_OPEN

    def test_proceed_requires_open_cart(self, flow):
        with pytest.raises(ValidationError):
            flow.proceed_to_checkout()
        assert flow.state == FlowState.BROWSING

    def test_proceed_with_empty_cart_is_refused(self, flow, cart_store):
        cart_store.clear()
        flow.open_cart()
        with pytest.raises(ValidationError) as exc_info:
            flow.proceed_to_checkout()
        assert "cart" in exc_info.value.messages
        assert flow.state == FlowState.CART_OPEN

    def test_close_checkout_returns_to_browsing(self, flow, cart_store):
        _to_checkout(flow)
        flow.close_checkout()
        assert flow.state == FlowState.BROWSING
        assert cart_store.totals().total_items == 1


class TestConfirmOrder:
    def test_confirm_moves_to_confirmation(self, flow, cart_store):
        _to_checkout(flow)
        confirmation = flow.confirm_order("Ada Lovelace", "ada@example.com", "12 St James's Square")

        assert flow.state == FlowState.CONFIRMATION_OPEN
        assert confirmation.persisted is True
        assert confirmation.summary.full_name == "Ada Lovelace"
        assert confirmation.summary.email == "ada@example.com"
        assert confirmation.summary.shipping_address == "12 St James's Square"
        assert confirmation.summary.total == 10.0
        assert cart_store.is_empty()

    def test_total_is_read_at_submission(self, flow, cart_store):
        _to_checkout(flow)
        cart_store.add_to_cart(2, "Plate", 4.5)
        confirmation = flow.confirm_order("Ada", "ada@example.com")
        assert confirmation.summary.total == 14.5
        assert confirmation.result.order.order_total == 14.5

    def test_blank_fields_are_rejected(self, flow):
        _to_checkout(flow)
        with pytest.raises(ValidationError) as exc_info:
            flow.confirm_order("  ", "")
        assert set(exc_info.value.messages) == {"full_name", "email"}
        assert flow.state == FlowState.CHECKOUT_OPEN

    def test_fields_are_trimmed(self, flow):
        _to_checkout(flow)
        confirmation = flow.confirm_order("  Ada  ", " ada@example.com ")
        assert confirmation.summary.full_name == "Ada"
        assert confirmation.summary.email == "ada@example.com"

    def test_confirm_outside_checkout_is_refused(self, flow):
        with pytest.raises(ValidationError):
            flow.confirm_order("Ada", "ada@example.com")

    def test_cart_emptied_after_checkout_opened_is_refused(self, flow, cart_store):
        _to_checkout(flow)
        cart_store.clear()
        with pytest.raises(ValidationError) as exc_info:
            flow.confirm_order("Ada", "ada@example.com")
        assert "cart" in exc_info.value.messages

    def test_missing_identity_still_reaches_confirmation(self, flow, identity, cart_store):
        identity.user_id = None
        _to_checkout(flow)
        confirmation = flow.confirm_order("Ada", "ada@example.com")

        assert flow.state == FlowState.CONFIRMATION_OPEN
        assert confirmation.persisted is False
        assert cart_store.totals().total_items == 1

    def test_close_confirmation(self, flow):
        _to_checkout(flow)
        flow.confirm_order("Ada", "ada@example.com")
        flow.close_confirmation()
        assert flow.state == FlowState.BROWSING
        assert flow.confirmation is None

    def test_cycle_can_repeat(self, flow, cart_store):
        _to_checkout(flow)
        flow.confirm_order("Ada", "ada@example.com")
        flow.close_confirmation()

        cart_store.add_to_cart(3, "Bowl", 8.0)
        _to_checkout(flow)
        confirmation = flow.confirm_order("Ada", "ada@example.com")
        assert confirmation.summary.total == 8.0


class TestHistoryModal:
    def test_open_and_close_history(self, flow):
        flow.open_history()
        assert flow.state == FlowState.ORDER_HISTORY_OPEN
        flow.close_history()
        assert flow.state == FlowState.BROWSING

    def test_history_cannot_open_over_cart(self, flow):
        flow.open_cart()
        with pytest.raises(ValidationError):
            flow.open_history()

    def test_cart_cannot_open_over_history(self, flow):
        flow.open_history()
        with pytest.raises(ValidationError):
            flow.open_cart()
