"""
Assembly module package exports.

- AssemblyController: custom-build orders (Pending -> Assembled -> Delivered).
"""

from .controller import AssemblyController

__all__ = ["AssemblyController"]
