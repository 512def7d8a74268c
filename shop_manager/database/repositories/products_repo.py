# shop_manager/database/repositories/products_repo.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, List, Optional, Sequence

from ...constants import MAX_QUANTITY
from ...utils.validators import parse_int, parse_money, require_text
from ...errors import DomainError, NotFoundError, ValidationError
from ..ids import next_id
from ..record_store import RecordStore
from .fields import as_float, as_int, money_field, pad, record_id


@dataclass
class Product:
    id: int
    name: str
    category: str
    brand: str
    cost_price: float
    sell_price: float
    stock: int
    min_stock_level: int

    FIELDS: ClassVar[tuple] = (
        "id", "name", "category", "brand",
        "cost_price", "sell_price", "stock", "min_stock_level",
    )

    def to_fields(self) -> List[str]:
        return [
            str(self.id),
            self.name,
            self.category,
            self.brand,
            money_field(self.cost_price),
            money_field(self.sell_price),
            str(self.stock),
            str(self.min_stock_level),
        ]

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Product":
        f = pad(fields, len(cls.FIELDS))
        return cls(
            id=record_id(f[0]),
            name=f[1],
            category=f[2],
            brand=f[3],
            cost_price=as_float(f[4]),
            sell_price=as_float(f[5]),
            stock=as_int(f[6]),
            min_stock_level=as_int(f[7]),
        )

    @property
    def is_low(self) -> bool:
        return self.stock <= self.min_stock_level


class ProductsRepo:
    def __init__(self, store: RecordStore[Product]):
        self.store = store

    # ---- Queries ----------------------------------------------------------

    def list_products(self) -> list[Product]:
        return list(self.store.scan())

    def search(self, term: str) -> list[Product]:
        """
        Case-insensitive substring match over name/category/brand.
        """
        needle = (term or "").strip().casefold()
        return [
            p for p in self.store.scan()
            if needle in p.name.casefold()
            or needle in p.category.casefold()
            or needle in p.brand.casefold()
        ]

    def get(self, product_id: int) -> Optional[Product]:
        return self.store.find_by_id(int(product_id))

    def require(self, product_id: int) -> Product:
        p = self.get(product_id)
        if p is None:
            raise NotFoundError(f"Product #{product_id} not found.")
        return p

    # ---- Mutations --------------------------------------------------------

    def create(
        self,
        name: str,
        category: str,
        brand: str,
        cost_price,
        sell_price,
        stock,
        min_stock_level,
    ) -> Product:
        """
        Validate, allocate the next id and append. The sell price may not be
        below the cost price.
        """
        name_n = require_text(name, "Product name")
        category_n = require_text(category, "Category")
        brand_n = require_text(brand, "Brand")
        cost = parse_money(cost_price, "Cost price")
        sell = parse_money(sell_price, "Sell price")
        if sell < cost:
            raise ValidationError(f"Sell price ({sell:.2f}) cannot be below cost price ({cost:.2f}).")
        qty = parse_int(stock, "Stock quantity", minimum=0, maximum=MAX_QUANTITY)
        min_level = parse_int(min_stock_level, "Minimum stock level", minimum=0, maximum=MAX_QUANTITY)

        product = Product(
            id=next_id(self.store),
            name=name_n,
            category=category_n,
            brand=brand_n,
            cost_price=cost,
            sell_price=sell,
            stock=qty,
            min_stock_level=min_level,
        )
        self.store.append(product)
        return product

    def adjust_stock(self, product_id: int, delta: int) -> Product:
        """
        stock := max(0, stock + delta) for the matching product, rewritten in
        place. Raises NotFoundError (file untouched) if no product matches.
        """
        delta = parse_int(delta, "Stock change")
        updated: list[Product] = []

        def apply(p: Product) -> Product:
            new = replace(p, stock=max(0, p.stock + delta))
            updated.append(new)
            return new

        if self.store.mutate_all(lambda p: p.id == product_id, apply) == 0:
            raise NotFoundError(f"Product #{product_id} not found.")
        return updated[0]


__all__ = ["Product", "ProductsRepo", "DomainError"]
