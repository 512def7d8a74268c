"""
Sales module package exports.

- SalesController: record a sale (stock is decremented) and list sales with
  the revenue total.
"""

from .controller import SalesController, SalesListing

__all__ = ["SalesController", "SalesListing"]
