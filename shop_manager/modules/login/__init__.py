"""
Login module package exports.

- LoginController: default-user bootstrap, credential check (returns a
  Session) and password change.
"""

from .controller import LoginController

__all__ = ["LoginController"]
