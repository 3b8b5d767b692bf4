"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    def history_for(self, user_id) -> list[Order]:
        """All orders placed by a user, newest first.

        Protean caps queries at 100 rows unless told otherwise; history is
        never paginated, so the cap is lifted.
        """
        return self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").limit(None).all().items
