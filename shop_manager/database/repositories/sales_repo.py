# shop_manager/database/repositories/sales_repo.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence

from ...utils.helpers import now_str
from ...utils.validators import parse_int, require_text
from ...errors import DomainError, ValidationError
from ..ids import next_id
from ..record_store import RecordStore
from .customers_repo import CustomersRepo
from .fields import as_float, as_int, money_field, pad, record_id
from .products_repo import ProductsRepo

_log = logging.getLogger(__name__)


@dataclass
class Sale:
    id: int
    product_id: int
    customer_id: int
    quantity: int
    total_price: float
    date: str
    cashier: str

    FIELDS: ClassVar[tuple] = (
        "id", "product_id", "customer_id", "quantity", "total_price", "date", "cashier",
    )

    def to_fields(self) -> List[str]:
        return [
            str(self.id),
            str(self.product_id),
            str(self.customer_id),
            str(self.quantity),
            money_field(self.total_price),
            self.date,
            self.cashier,
        ]

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Sale":
        f = pad(fields, len(cls.FIELDS))
        return cls(
            id=record_id(f[0]),
            product_id=as_int(f[1]),
            customer_id=as_int(f[2]),
            quantity=as_int(f[3]),
            total_price=as_float(f[4]),
            date=f[5],
            cashier=f[6],
        )


class SalesRepo:
    """
    Sales are append-only. Recording a sale checks that the product and the
    customer exist, captures total_price from the product's current sell price
    and then takes the quantity out of stock.
    """

    def __init__(self, store: RecordStore[Sale], products: ProductsRepo, customers: CustomersRepo):
        self.store = store
        self.products = products
        self.customers = customers

    # ---- Queries ----------------------------------------------------------

    def list_sales(self) -> list[Sale]:
        return list(self.store.scan())

    def get(self, sale_id: int) -> Optional[Sale]:
        return self.store.find_by_id(int(sale_id))

    # ---- Mutations --------------------------------------------------------

    def record_sale(
        self,
        product_id: int,
        customer_id: int,
        quantity,
        cashier: str,
        *,
        date: str | None = None,
    ) -> Sale:
        """
        Append one sale and decrement the product's stock.

        Raises:
            NotFoundError: product or customer id does not resolve.
            ValidationError: quantity outside 1..stock, or empty cashier.
        """
        product = self.products.require(product_id)
        self.customers.require(customer_id)
        qty = parse_int(quantity, "Quantity", minimum=1)
        if qty > product.stock:
            raise ValidationError(
                f"Quantity {qty} exceeds available stock ({product.stock}) for '{product.name}'."
            )
        cashier_n = require_text(cashier, "Cashier")

        sale = Sale(
            id=next_id(self.store),
            product_id=product.id,
            customer_id=int(customer_id),
            quantity=qty,
            total_price=round(product.sell_price * qty, 2),
            date=date or now_str(),
            cashier=cashier_n,
        )
        self.store.append(sale)
        self.products.adjust_stock(product.id, -qty)
        _log.info("sale #%d: product #%d x%d = %.2f", sale.id, sale.product_id, qty, sale.total_price)
        return sale


__all__ = ["Sale", "SalesRepo", "DomainError"]
