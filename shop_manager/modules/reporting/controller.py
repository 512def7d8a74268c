# shop_manager/modules/reporting/controller.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..base_module import BaseModule
from ...constants import MAX_QUANTITY
from ...database.repositories.products_repo import Product
from ...utils.permissions import Session, requires
from ...utils.validators import parse_int


@dataclass(frozen=True)
class SalesSummary:
    transactions: int
    units: int
    revenue: float
    average: float


@dataclass(frozen=True)
class ProfitAnalysis:
    transactions: int
    revenue: float
    cost: float
    profit: float
    margin_pct: float


class ReportingController(BaseModule):
    """
    Read-only reports over the sales and product files.
    Every report needs can_view_reports.
    """

    @requires("can_view_reports")
    def low_stock(self, session: Session, threshold=None) -> list[Product]:
        """
        Products with stock <= threshold. Without a threshold each product is
        compared with its own min_stock_level.
        """
        products = self.repos.products.list_products()
        if threshold is None:
            return [p for p in products if p.is_low]
        limit = parse_int(threshold, "Low stock threshold", minimum=0, maximum=MAX_QUANTITY)
        return [p for p in products if p.stock <= limit]

    @requires("can_view_reports")
    def sales_summary(self, session: Session) -> SalesSummary:
        sales = self.repos.sales.list_sales()
        revenue = round(sum(s.total_price for s in sales), 2)
        count = len(sales)
        return SalesSummary(
            transactions=count,
            units=sum(s.quantity for s in sales),
            revenue=revenue,
            average=round(revenue / count, 2) if count else 0.0,
        )

    @requires("can_view_reports")
    def profit_analysis(self, session: Session) -> ProfitAnalysis:
        """
        Cost is the product's current cost price times the quantity sold.
        Sales whose product no longer exists count at zero cost.
        """
        cost_by_id = {p.id: p.cost_price for p in self.repos.products.list_products()}
        sales = self.repos.sales.list_sales()

        revenue = cost = 0.0
        for s in sales:
            revenue += s.total_price
            unit_cost: Optional[float] = cost_by_id.get(s.product_id)
            if unit_cost is None:
                self.log.debug("sale #%d: product #%d missing; cost counted as 0", s.id, s.product_id)
                unit_cost = 0.0
            cost += unit_cost * s.quantity

        profit = revenue - cost
        return ProfitAnalysis(
            transactions=len(sales),
            revenue=round(revenue, 2),
            cost=round(cost, 2),
            profit=round(profit, 2),
            margin_pct=round(profit / revenue * 100, 2) if revenue > 0 else 0.0,
        )
