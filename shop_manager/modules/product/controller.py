from __future__ import annotations

from ..base_module import BaseModule
from ...database.repositories.products_repo import Product
from ...utils.permissions import Session, requires


class ProductController(BaseModule):
    @property
    def repo(self):
        return self.repos.products

    # ---- Queries ----------------------------------------------------------

    def list_products(self, session: Session) -> list[Product]:
        """Any signed-in user may browse the catalogue."""
        return self.repo.list_products()

    def search_products(self, session: Session, term: str) -> list[Product]:
        return self.repo.search(term)

    # ---- Mutations --------------------------------------------------------

    @requires("can_manage_products")
    def add_product(
        self,
        session: Session,
        name: str,
        category: str,
        brand: str,
        cost_price,
        sell_price,
        stock,
        min_stock_level,
    ) -> Product:
        product = self.repo.create(name, category, brand, cost_price, sell_price, stock, min_stock_level)
        self.log.info("%s added product #%d (%s)", session.username, product.id, product.name)
        return product

    @requires("can_manage_products")
    def adjust_stock(self, session: Session, product_id: int, delta) -> Product:
        """Add (or with a negative delta, remove) stock; never goes below zero."""
        product = self.repo.adjust_stock(int(product_id), delta)
        self.log.info("%s set stock of product #%d to %d", session.username, product.id, product.stock)
        return product
