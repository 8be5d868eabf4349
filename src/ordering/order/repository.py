"""Repository for the Order aggregate: lookups, listing and removal."""

import math
from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderItem

_SORTABLE_FIELDS = {"created_at", "updated_at", "total_amount", "status"}


@dataclass(frozen=True)
class OrderPage:
    items: list = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order repository.

    Writes go through ``add``, which checks the aggregate's version, so two
    requests that loaded the same order cannot both save it.
    """

    def get_order(self, order_id) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise ObjectNotFoundError(f"Order with ID '{order_id}' not found.") from None

    def remove(self, order: Order) -> None:
        """Hard-delete the order together with its items."""
        item_dao = current_domain.repository_for(OrderItem)._dao
        for item in order.items:
            item_dao.delete(item)
        self._dao.delete(order)

    def search(
        self,
        user_id=None,
        status=None,
        payment_type=None,
        min_total=None,
        max_total=None,
        created_from=None,
        created_to=None,
        page: int = 1,
        page_size: int = 20,
        order_by: str = "-created_at",
    ) -> OrderPage:
        """Return one page of orders matching every given filter."""
        page = max(page, 1)
        page_size = max(page_size, 1)

        if order_by.lstrip("-") not in _SORTABLE_FIELDS:
            order_by = "-created_at"

        filters = {}
        if user_id is not None:
            filters["user_id"] = str(user_id)
        if status is not None:
            filters["status"] = status
        if payment_type is not None:
            filters["payment_type"] = payment_type
        if min_total is not None:
            filters["total_amount__gte"] = min_total
        if max_total is not None:
            filters["total_amount__lte"] = max_total
        if created_from is not None:
            filters["created_at__gte"] = created_from
        if created_to is not None:
            filters["created_at__lte"] = created_to

        query = self.query
        if filters:
            query = query.filter(**filters)
        results = query.order_by(order_by).offset((page - 1) * page_size).limit(page_size).all()

        return OrderPage(items=list(results.items), total=results.total, page=page, page_size=page_size)
