"""Cart aggregate: the visitor's in-memory shopping cart.

A cart lives only as long as its storefront session: it is built fresh when
the session starts and is never written to a repository. Its contents reach
the order store only as a snapshot taken at checkout.

Each product appears on at most one line. Adding a product that is already in
the cart bumps that line's quantity; removing the last unit drops the line
instead of leaving it at zero.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String

from ordering.cart.events import CartCleared, CartItemAdded, CartItemDecremented, CartItemRemoved
from ordering.domain import ordering


@dataclass(frozen=True)
class CartTotals:
    total_items: int
    total_price: float


@ordering.entity(part_of="Cart")
class CartLine:
    product_id = Integer(required=True)
    name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@ordering.aggregate
class Cart:
    lines = HasMany(CartLine)
    created_at = DateTime()

    @invariant.post
    def products_must_not_repeat_across_lines(self):
        product_ids = [line.product_id for line in self.lines]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"lines": ["A product can only appear on one cart line"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls):
        return cls(created_at=datetime.now(UTC))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((line for line in self.lines if line.product_id == int(product_id)), None)

    def totals(self) -> CartTotals:
        """Recompute item count and price from the current lines."""
        return CartTotals(
            total_items=sum(line.quantity for line in self.lines),
            total_price=round(sum(line.unit_price * line.quantity for line in self.lines), 2),
        )

    def snapshot(self) -> list[dict]:
        """Copy the lines by value, in the order they were added."""
        return [
            {
                "product_id": line.product_id,
                "name": line.name or "",
                "unit_price": line.unit_price,
                "quantity": line.quantity,
            }
            for line in self.lines
        ]

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_to_cart(self, product_id, name, unit_price):
        """Add exactly one unit of a product."""
        line = self.line_for(product_id)

        if line:
            line.quantity += 1
        else:
            line = CartLine(
                product_id=int(product_id),
                name=name,
                unit_price=unit_price,
                quantity=1,
            )
            self.add_lines(line)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=line.product_id,
                name=line.name or "",
                unit_price=line.unit_price,
                quantity=line.quantity,
            )
        )

    def remove_one(self, product_id):
        """Take one unit of a product out. Unknown products are ignored."""
        line = self.line_for(product_id)
        if line is None:
            return

        if line.quantity > 1:
            line.quantity -= 1
            self.raise_(
                CartItemDecremented(
                    cart_id=str(self.id),
                    product_id=line.product_id,
                    quantity=line.quantity,
                )
            )
        else:
            self.remove_lines(line)
            self.raise_(
                CartItemRemoved(
                    cart_id=str(self.id),
                    product_id=line.product_id,
                )
            )

    def clear(self):
        """Drop every line."""
        lines = list(self.lines)
        for line in lines:
            self.remove_lines(line)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                lines_removed=len(lines),
            )
        )

    # -------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------
    def drain_events(self) -> list:
        """Hand over the events raised since the last drain, oldest first."""
        events = list(self._events)
        self._events.clear()
        return events
