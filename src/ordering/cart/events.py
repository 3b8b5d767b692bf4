"""Domain events for the Cart aggregate.

Carts are never persisted, so these events are not stored anywhere. The
CartStore drains them after every mutation and hands them to its subscribers.
"""

from protean.fields import Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartItemAdded:
    """One unit of a product was added to the cart."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    product_id = Integer(required=True)
    name = String(max_length=255)
    unit_price = Float(required=True)
    quantity = Integer(required=True)  # line quantity after the add


@ordering.event(part_of="Cart")
class CartItemDecremented:
    """One unit of a product was taken out of the cart; the line remains."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    product_id = Integer(required=True)
    quantity = Integer(required=True)  # line quantity after the decrement


@ordering.event(part_of="Cart")
class CartItemRemoved:
    """The last unit of a product was taken out, removing its line."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    product_id = Integer(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """Every line was removed from the cart."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
