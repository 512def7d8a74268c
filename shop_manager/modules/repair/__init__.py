"""
Repair module package exports.

- RepairController: book repair jobs and move them through their statuses.
"""

from .controller import RepairController

__all__ = ["RepairController"]
