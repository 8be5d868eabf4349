"""Ordering bounded context — Order lifecycle and cart-to-order conversion.

Turns a customer's cart into a Draft order by reading the cart, catalog
and profile services, then drives the order through
Draft → Pending → Paid → Completed/Canceled.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")
