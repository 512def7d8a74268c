"""
Customer module package exports.

- CustomerController: listing/search and permission-gated create.
"""

from .controller import CustomerController

__all__ = ["CustomerController"]
