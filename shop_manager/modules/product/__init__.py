"""
Product module package exports.

- ProductController: catalogue listing/search plus permission-gated create
  and stock adjustment.
"""

from .controller import ProductController

__all__ = ["ProductController"]
