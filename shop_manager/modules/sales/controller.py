from __future__ import annotations

from typing import NamedTuple

from ..base_module import BaseModule
from ...database.repositories.sales_repo import Sale
from ...utils.permissions import Session, requires


class SalesListing(NamedTuple):
    sales: list[Sale]
    total_revenue: float


class SalesController(BaseModule):
    """
    Point-of-sale operations. The cashier on each sale is the session's
    username.
    """

    @property
    def repo(self):
        return self.repos.sales

    @requires("can_manage_sales")
    def make_sale(self, session: Session, product_id: int, customer_id: int, quantity) -> Sale:
        return self.repo.record_sale(int(product_id), int(customer_id), quantity, session.username)

    @requires("can_manage_sales")
    def list_sales(self, session: Session) -> SalesListing:
        sales = self.repo.list_sales()
        return SalesListing(sales, round(sum(s.total_price for s in sales), 2))
