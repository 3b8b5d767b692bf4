"""Ordering bounded context: shopping cart, checkout and order history.

Handles the per-session cart (in-memory aggregate), the checkout flow that
turns a cart into a persisted order, and reading a visitor's past orders.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
