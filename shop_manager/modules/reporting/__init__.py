"""
Reporting package exports.

- ReportingController: low stock, sales summary and profit analysis.
"""

from .controller import ProfitAnalysis, ReportingController, SalesSummary

__all__ = ["ReportingController", "SalesSummary", "ProfitAnalysis"]
