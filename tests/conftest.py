# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - Every test gets its own data folder under tmp_path (no shared state)
# - bcrypt cost is lowered for the whole suite to keep it fast
# - Provide wired repositories, a seeded catalogue and ready-made sessions
# ---------------------------------------------------------------------

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from shop_manager.constants import CAPABILITIES
from shop_manager.database import open_repositories
from shop_manager.utils import auth
from shop_manager.utils.permissions import Session


# ---------- Fast password hashing ----------
@pytest.fixture(autouse=True)
def _fast_bcrypt(monkeypatch):
    monkeypatch.setattr(auth, "_BCRYPT_DEFAULT_ROUNDS", 4)
    monkeypatch.setattr(auth, "_BCRYPT_MIN_ACCEPTABLE_ROUNDS", 4)


# ---------- Logging: drop handlers bound to per-test streams/files ----------
@pytest.fixture(autouse=True)
def _reset_loggers():
    yield
    for name in ("shop_manager", "shop_manager.backup"):
        logger = logging.getLogger(name)
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()
        logger.setLevel(logging.NOTSET)


# ---------- Storage ----------
@pytest.fixture()
def data_dir(tmp_path) -> Path:
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture()
def repos(data_dir):
    return open_repositories(data_dir)


@pytest.fixture()
def seeded(repos):
    """One product (10 in stock at 9.99) and one customer."""
    product = repos.products.create("USB Cable", "Accessories", "Anker", "4.50", "9.99", 10, 2)
    customer = repos.customers.create("Ada Lovelace", "555-0101", "ada@example.com", "12 Analytical Way")
    return {"product": product, "customer": customer}


# ---------- Sessions ----------
@pytest.fixture()
def admin_session() -> Session:
    return Session(user_id=1, username="admin", **{cap: True for cap in CAPABILITIES})


@pytest.fixture()
def clerk_session() -> Session:
    """Signed in, but holds no capability at all."""
    return Session(user_id=2, username="clerk")
