from __future__ import annotations

import logging

from ..database import Repositories


class BaseModule:
    """
    Common base for the module controllers.

    A controller wraps the repositories for one data directory. Every public
    operation takes the caller's Session as its first argument.
    """

    def __init__(self, repos: Repositories) -> None:
        self.repos = repos
        self.log = logging.getLogger(type(self).__module__)
