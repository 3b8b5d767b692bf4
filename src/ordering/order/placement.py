"""Order placement: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    order_total = Float(required=True, min_value=0.0)
    items = Text(required=True)  # JSON: list of {product_id, name, unit_price, quantity}


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        order = Order.place(
            user_id=command.user_id,
            items_data=items_data,
            order_total=command.order_total,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            order_total=order.order_total,
            item_count=len(items_data),
        )
        return str(order.id)
