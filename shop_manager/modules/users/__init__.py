"""
User administration package exports.

- UsersController: create, list, edit permissions, deactivate and delete
  user accounts.
"""

from .controller import UsersController, check_password_policy

__all__ = ["UsersController", "check_password_policy"]
