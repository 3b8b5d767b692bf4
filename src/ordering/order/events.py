"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A checkout was persisted as an order."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_total = Float(required=True)
    item_count = Integer(required=True)
    items = Text(required=True)  # JSON: list of line snapshots
    created_at = DateTime(required=True)
