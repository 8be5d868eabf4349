"""Failure kinds that protean does not already provide.

NotFound, InvalidState and Validation are raised as protean's own
``ObjectNotFoundError``, ``InvalidOperationError`` and ``ValidationError``.
"""


class NotOrderOwnerError(Exception):
    """The caller is not the owner of the order it tried to act on."""

    def __init__(self, user_id, order_id):
        self.user_id = str(user_id)
        self.order_id = str(order_id)
        super().__init__(f"User {self.user_id} is not authorized to confirm order {self.order_id}")


class UpstreamUnavailable(Exception):
    """A remote collaborator (cart, catalog, profile) could not be reached.

    Distinct from a business-rule failure so callers can tell
    "your cart is empty" apart from "the catalog service is down".
    """

    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"{service} service unavailable: {reason}")
