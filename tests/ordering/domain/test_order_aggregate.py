"""Tests for the Order aggregate: placement from a cart snapshot."""

import json

import pytest
from ordering.order.events import OrderPlaced
from ordering.order.order import Order, OrderedItem
from protean.exceptions import ValidationError

ITEMS = [
    {"product_id": 1, "name": "Alpha", "unit_price": 10.0, "quantity": 2},
    {"product_id": 2, "name": "Beta", "unit_price": 5.0, "quantity": 1},
]


class TestOrderPlacement:
    def test_place_sets_fields(self):
        order = Order.place(user_id="anon-123", items_data=ITEMS, order_total=25.0)
        assert str(order.user_id) == "anon-123"
        assert order.order_total == 25.0
        assert order.created_at is not None
        assert order.id is not None

    def test_place_copies_items_in_cart_order(self):
        order = Order.place(user_id="anon-123", items_data=ITEMS, order_total=25.0)
        lines = order.lines()
        assert [item.product_id for item in lines] == [1, 2]
        assert [item.line_number for item in lines] == [1, 2]
        assert lines[0].name == "Alpha"
        assert lines[0].quantity == 2

    def test_line_totals(self):
        order = Order.place(user_id="anon-123", items_data=ITEMS, order_total=25.0)
        assert [item.line_total for item in order.lines()] == [20.0, 5.0]

    def test_items_are_copies(self):
        items = [dict(item) for item in ITEMS]
        order = Order.place(user_id="anon-123", items_data=items, order_total=25.0)
        items[0]["unit_price"] = 99.0
        assert order.lines()[0].unit_price == 10.0

    def test_total_within_a_cent_rounding_is_accepted(self):
        items = [{"product_id": 1, "name": "Pen", "unit_price": 0.1, "quantity": 3}]
        order = Order.place(user_id="anon-123", items_data=items, order_total=0.3)
        assert order.order_total == 0.3

    def test_mismatched_total_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Order.place(user_id="anon-123", items_data=ITEMS, order_total=30.0)
        assert "order_total" in exc_info.value.messages

    def test_user_id_is_required(self):
        with pytest.raises(ValidationError):
            Order.place(user_id=None, items_data=ITEMS, order_total=25.0)


class TestOrderPlacedEvent:
    def test_place_raises_order_placed(self):
        order = Order.place(user_id="anon-123", items_data=ITEMS, order_total=25.0)
        assert len(order._events) == 1

        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_id == str(order.id)
        assert event.user_id == "anon-123"
        assert event.order_total == 25.0
        assert event.item_count == 2
        assert json.loads(event.items) == ITEMS

    def test_version(self):
        assert OrderPlaced.__version__ == "v1"


class TestOrderedItemEntity:
    def test_line_total(self):
        item = OrderedItem(line_number=1, product_id=1, name="Alpha", unit_price=2.5, quantity=4)
        assert item.line_total == 10.0

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            OrderedItem(line_number=1, product_id=1, name="Alpha", unit_price=2.5, quantity=0)
