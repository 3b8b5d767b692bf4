"""Order aggregate: an immutable record of a completed checkout.

An order is written exactly once, when a checkout is submitted, and is never
updated or deleted afterwards. Its items are copies of the cart lines taken at
submission time, so later catalogue price changes never touch a stored order.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.domain import ordering
from ordering.order.events import OrderPlaced


@ordering.entity(part_of="Order")
class OrderedItem:
    """A cart line as it stood when the order was placed."""

    line_number = Integer(required=True, min_value=1)
    product_id = Integer(required=True)
    name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    order_total = Float(required=True, min_value=0.0)
    items_ordered = HasMany(OrderedItem)
    created_at = DateTime(required=True)

    @classmethod
    def place(cls, user_id, items_data, order_total):
        """Create an order from a cart snapshot.

        Args:
            user_id: Identity the order is attributed to.
            items_data: List of dicts with product_id, name, unit_price, quantity,
                in cart order.
            order_total: Total shown to the visitor at checkout. Must equal the
                sum of the items.
        """
        items_total = round(sum(item["unit_price"] * item["quantity"] for item in items_data), 2)
        if round(order_total, 2) != items_total:
            raise ValidationError(
                {"order_total": [f"Order total {order_total:.2f} does not match items total {items_total:.2f}"]}
            )

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            order_total=items_total,
            created_at=now,
            items_ordered=[
                OrderedItem(
                    line_number=position,
                    product_id=item["product_id"],
                    name=item.get("name") or "",
                    unit_price=item["unit_price"],
                    quantity=item["quantity"],
                )
                for position, item in enumerate(items_data, start=1)
            ],
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                order_total=items_total,
                item_count=len(items_data),
                items=json.dumps(items_data),
                created_at=now,
            )
        )
        return order

    def lines(self) -> list[OrderedItem]:
        """Ordered items in the order they were added to the cart."""
        return sorted(self.items_ordered, key=lambda item: item.line_number)
