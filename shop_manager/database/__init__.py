# shop_manager/database/__init__.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import resolve_data_dir
from ..constants import (
    ASSEMBLIES_FILE,
    CUSTOMERS_FILE,
    PRODUCTS_FILE,
    REPAIRS_FILE,
    SALES_FILE,
    USERS_FILE,
)
from .record_store import FlatFileStore
from .repositories import (
    AssembliesRepo,
    Assembly,
    Customer,
    CustomersRepo,
    Product,
    ProductsRepo,
    Repair,
    RepairsRepo,
    Sale,
    SalesRepo,
    User,
    UsersRepo,
)


@dataclass
class Repositories:
    """Every repository for one data directory, wired to its flat file."""
    data_dir: Path
    products: ProductsRepo
    customers: CustomersRepo
    sales: SalesRepo
    repairs: RepairsRepo
    assemblies: AssembliesRepo
    users: UsersRepo


def open_repositories(data_dir: str | Path | None = None, *, verbose: bool = False) -> Repositories:
    """
    Returns the repositories for `data_dir` (default: config.DATA_DIR), creating
    the directory if needed. Files are created lazily on first append.
    """
    root = resolve_data_dir(data_dir)

    def store(file_name: str, record_type):
        return FlatFileStore(root / file_name, record_type, verbose=verbose)

    products = ProductsRepo(store(PRODUCTS_FILE, Product))
    customers = CustomersRepo(store(CUSTOMERS_FILE, Customer))
    return Repositories(
        data_dir=root,
        products=products,
        customers=customers,
        sales=SalesRepo(store(SALES_FILE, Sale), products, customers),
        repairs=RepairsRepo(store(REPAIRS_FILE, Repair), customers),
        assemblies=AssembliesRepo(store(ASSEMBLIES_FILE, Assembly), customers),
        users=UsersRepo(store(USERS_FILE, User)),
    )


__all__ = [
    "Repositories",
    "open_repositories",
]
