# shop_manager/database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from shop_manager.database.repositories import (
        ProductsRepo, Product,
        CustomersRepo, Customer,
        SalesRepo, Sale,
        RepairsRepo, Repair,
        AssembliesRepo, Assembly,
        UsersRepo, User,
    )
"""

# ---------------- Products -----------------
from .products_repo import ProductsRepo, Product

# ---------------- Customers ----------------
from .customers_repo import CustomersRepo, Customer

# ------------------ Sales ------------------
from .sales_repo import SalesRepo, Sale

# ----------- Repairs / Assemblies ----------
from .repairs_repo import RepairsRepo, Repair
from .assemblies_repo import AssembliesRepo, Assembly

# ------------------ Users ------------------
from .users_repo import UsersRepo, User

__all__ = [
    "ProductsRepo",
    "Product",
    "CustomersRepo",
    "Customer",
    "SalesRepo",
    "Sale",
    "RepairsRepo",
    "Repair",
    "AssembliesRepo",
    "Assembly",
    "UsersRepo",
    "User",
]
