# shop_manager/main.py
# Command line entry point (`shop`).
#
# Commands (global options go before the group name):
#   shop [--data-dir DIR] [--username U] [--password P] [--verbose] <group> <command>
#
#   shop products list | search TERM | add | adjust-stock ID DELTA
#   shop customers list | search TERM | add
#   shop sales list | make --product-id N --customer-id N --quantity N
#   shop repairs list | add | status ID STATUS
#   shop assemblies list | add | status ID STATUS
#   shop users list | add USERNAME | edit ID | deactivate ID | delete ID [--yes]
#   shop reports low-stock [--threshold N] | sales-summary | profit
#   shop backup
#   shop passwd
#
# Credentials come from --username/--password, SHOP_USERNAME/SHOP_PASSWORD,
# or an interactive prompt. The first run creates admin/admin.

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click

from .config import DATA_DIR_ENV
from .constants import ASSEMBLY_STATUSES, CAPABILITIES, REPAIR_STATUSES
from .database import Repositories, open_repositories
from .errors import DomainError
from .modules.assembly import AssemblyController
from .modules.backup_restore import create_backup
from .modules.customer import CustomerController
from .modules.login import LoginController
from .modules.product import ProductController
from .modules.repair import RepairController
from .modules.reporting import ReportingController
from .modules.sales import SalesController
from .modules.users import UsersController
from .utils.helpers import fmt_money
from .utils.loggers import ROOT_LOGGER, get_logger
from .utils.permissions import CAPABILITY_LABELS, Session

# --grant/--revoke take the short name; "products" -> "can_manage_products"
CAPABILITY_NAMES = {cap.rsplit("_", 1)[-1]: cap for cap in CAPABILITIES}


@dataclass
class AppContext:
    repos: Repositories
    username: Optional[str]
    password: Optional[str]
    verbose: bool = False
    _session: Optional[Session] = None

    def session(self) -> Session:
        """Log in on first use; later calls reuse the session."""
        if self._session is None:
            login = LoginController(self.repos)
            login.ensure_default_user()
            username = self.username or click.prompt("Username")
            password = self.password or click.prompt("Password", hide_input=True)
            self._session = login.authenticate(username, password)
        return self._session


pass_app = click.make_pass_decorator(AppContext)


class ShopGroup(click.Group):
    """Root group: any DomainError becomes `Error: <message>` and exit status 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except DomainError as exc:
            logging.getLogger(ROOT_LOGGER).debug("command failed", exc_info=True)
            raise click.ClickException(str(exc)) from exc


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _caps(names) -> dict[str, bool]:
    return {CAPABILITY_NAMES[n]: True for n in names}


# =============================================================================
# ROOT
# =============================================================================

@click.group(cls=ShopGroup)
@click.option("--data-dir", type=click.Path(file_okay=False, path_type=Path), envvar=DATA_DIR_ENV,
              help="Folder holding the data files (default: ./data).")
@click.option("--username", envvar="SHOP_USERNAME", help="Login name (prompted if omitted).")
@click.option("--password", envvar="SHOP_PASSWORD", help="Password (prompted if omitted).")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging on stderr.")
@click.pass_context
def cli(ctx: click.Context, data_dir, username, password, verbose):
    """Shop Manager: inventory, customers, sales, repairs and assemblies."""
    get_logger(ROOT_LOGGER, logging.DEBUG if verbose else logging.WARNING)
    ctx.obj = AppContext(
        repos=open_repositories(data_dir, verbose=verbose),
        username=username,
        password=password,
        verbose=verbose,
    )


# =============================================================================
# PRODUCTS
# =============================================================================

@cli.group("products")
def products_group():
    """Product catalogue and stock."""


def _echo_products(products) -> None:
    if not products:
        click.echo("No products found.")
        return
    click.echo(f"{'ID':<4} {'Name':<20} {'Category':<15} {'Brand':<12} {'Cost':>10} {'Price':>10} {'Stock':>6} {'Min':>5}")
    click.echo("-" * 88)
    for p in products:
        mark = " LOW" if p.is_low else ""
        click.echo(
            f"{p.id:<4} {p.name:<20} {p.category:<15} {p.brand:<12} "
            f"{fmt_money(p.cost_price):>10} {fmt_money(p.sell_price):>10} {p.stock:>6} {p.min_stock_level:>5}{mark}"
        )


@products_group.command("list")
@pass_app
def products_list(app: AppContext):
    """List every product."""
    _echo_products(ProductController(app.repos).list_products(app.session()))


@products_group.command("search")
@click.argument("term")
@pass_app
def products_search(app: AppContext, term):
    """Search by name, category or brand."""
    _echo_products(ProductController(app.repos).search_products(app.session(), term))


@products_group.command("add")
@click.option("--name", prompt="Product Name")
@click.option("--category", prompt="Category")
@click.option("--brand", prompt="Brand")
@click.option("--cost", "cost_price", prompt="Cost Price")
@click.option("--price", "sell_price", prompt="Sell Price")
@click.option("--stock", prompt="Stock Quantity")
@click.option("--min-stock", "min_stock_level", prompt="Minimum Stock Level")
@pass_app
def products_add(app: AppContext, name, category, brand, cost_price, sell_price, stock, min_stock_level):
    """Add a product."""
    p = ProductController(app.repos).add_product(
        app.session(), name, category, brand, cost_price, sell_price, stock, min_stock_level
    )
    click.echo(f"Product #{p.id} added.")


@products_group.command("adjust-stock")
@click.argument("product_id", type=int)
@click.argument("delta")
@pass_app
def products_adjust_stock(app: AppContext, product_id, delta):
    """Add DELTA to a product's stock (negative removes; floors at 0)."""
    p = ProductController(app.repos).adjust_stock(app.session(), product_id, delta)
    click.echo(f"Product #{p.id} stock is now {p.stock}.")


# =============================================================================
# CUSTOMERS
# =============================================================================

@cli.group("customers")
def customers_group():
    """Customer records."""


def _echo_customers(customers) -> None:
    if not customers:
        click.echo("No customers found.")
        return
    click.echo(f"{'ID':<4} {'Name':<20} {'Phone':<15} {'Email':<25} Address")
    click.echo("-" * 80)
    for c in customers:
        click.echo(f"{c.id:<4} {c.name:<20} {c.phone:<15} {c.email:<25} {c.address}")


@customers_group.command("list")
@pass_app
def customers_list(app: AppContext):
    _echo_customers(CustomerController(app.repos).list_customers(app.session()))


@customers_group.command("search")
@click.argument("term")
@pass_app
def customers_search(app: AppContext, term):
    """Search by name, phone or email."""
    _echo_customers(CustomerController(app.repos).search_customers(app.session(), term))


@customers_group.command("add")
@click.option("--name", prompt="Name")
@click.option("--phone", prompt="Phone")
@click.option("--email", prompt="Email")
@click.option("--address", prompt="Address")
@pass_app
def customers_add(app: AppContext, name, phone, email, address):
    c = CustomerController(app.repos).add_customer(app.session(), name, phone, email, address)
    click.echo(f"Customer #{c.id} added.")


# =============================================================================
# SALES
# =============================================================================

@cli.group("sales")
def sales_group():
    """Record and list sales."""


@sales_group.command("make")
@click.option("--product-id", type=int, prompt="Product ID")
@click.option("--customer-id", type=int, prompt="Customer ID")
@click.option("--quantity", prompt="Quantity")
@pass_app
def sales_make(app: AppContext, product_id, customer_id, quantity):
    """Sell a product to a customer; stock is reduced."""
    s = SalesController(app.repos).make_sale(app.session(), product_id, customer_id, quantity)
    click.echo(f"Sale #{s.id} recorded. Total: {fmt_money(s.total_price)}")


@sales_group.command("list")
@pass_app
def sales_list(app: AppContext):
    listing = SalesController(app.repos).list_sales(app.session())
    if not listing.sales:
        click.echo("No sales recorded.")
        return
    click.echo(f"{'ID':<4} {'Product':<8} {'Customer':<9} {'Qty':>5} {'Total':>12}  {'Date':<20} Cashier")
    click.echo("-" * 80)
    for s in listing.sales:
        click.echo(
            f"{s.id:<4} {s.product_id:<8} {s.customer_id:<9} {s.quantity:>5} "
            f"{fmt_money(s.total_price):>12}  {s.date:<20} {s.cashier}"
        )
    click.echo(f"\nSummary: {len(listing.sales)} sales, Total Revenue: {fmt_money(listing.total_revenue)}")


# =============================================================================
# REPAIRS / ASSEMBLIES
# =============================================================================

@cli.group("repairs")
def repairs_group():
    """Repair jobs."""


@repairs_group.command("list")
@pass_app
def repairs_list(app: AppContext):
    repairs = RepairController(app.repos).list_repairs(app.session())
    if not repairs:
        click.echo("No repairs found.")
        return
    click.echo(f"{'ID':<4} {'Cust':<5} {'Device':<18} {'Status':<12} {'Estimate':>10}  {'Received':<20} Completed")
    click.echo("-" * 90)
    for r in repairs:
        click.echo(
            f"{r.id:<4} {r.customer_id:<5} {r.device:<18} {r.status:<12} "
            f"{fmt_money(r.cost_estimate):>10}  {r.date_received:<20} {r.date_completed or '-'}"
        )


@repairs_group.command("add")
@click.option("--customer-id", type=int, prompt="Customer ID")
@click.option("--device", prompt="Device")
@click.option("--problem", prompt="Problem")
@click.option("--estimate", "cost_estimate", prompt="Cost Estimate")
@pass_app
def repairs_add(app: AppContext, customer_id, device, problem, cost_estimate):
    r = RepairController(app.repos).create_repair(app.session(), customer_id, device, problem, cost_estimate)
    click.echo(f"Repair #{r.id} received.")


@repairs_group.command("status")
@click.argument("repair_id", type=int)
@click.argument("status", type=click.Choice(REPAIR_STATUSES))
@pass_app
def repairs_status(app: AppContext, repair_id, status):
    """Move a repair job to STATUS."""
    r = RepairController(app.repos).set_repair_status(app.session(), repair_id, status)
    click.echo(f"Repair #{r.id} is now {r.status}.")


@cli.group("assemblies")
def assemblies_group():
    """Custom build orders."""


@assemblies_group.command("list")
@pass_app
def assemblies_list(app: AppContext):
    orders = AssemblyController(app.repos).list_assemblies(app.session())
    if not orders:
        click.echo("No assembly orders found.")
        return
    click.echo(f"{'ID':<4} {'Cust':<5} {'Description':<30} {'Price':>10}  {'Status':<10} Date")
    click.echo("-" * 85)
    for a in orders:
        click.echo(f"{a.id:<4} {a.customer_id:<5} {a.description:<30} {fmt_money(a.price):>10}  {a.status:<10} {a.date}")


@assemblies_group.command("add")
@click.option("--customer-id", type=int, prompt="Customer ID")
@click.option("--description", prompt="Description")
@click.option("--price", prompt="Price")
@pass_app
def assemblies_add(app: AppContext, customer_id, description, price):
    a = AssemblyController(app.repos).create_assembly(app.session(), customer_id, description, price)
    click.echo(f"Assembly order #{a.id} created.")


@assemblies_group.command("status")
@click.argument("assembly_id", type=int)
@click.argument("status", type=click.Choice(ASSEMBLY_STATUSES))
@pass_app
def assemblies_status(app: AppContext, assembly_id, status):
    a = AssemblyController(app.repos).set_assembly_status(app.session(), assembly_id, status)
    click.echo(f"Assembly order #{a.id} is now {a.status}.")


# =============================================================================
# USERS
# =============================================================================

@cli.group("users")
def users_group():
    """User accounts and permissions."""


@users_group.command("list")
@pass_app
def users_list(app: AppContext):
    users = UsersController(app.repos).list_users(app.session())
    click.echo(f"{'ID':<4} {'Username':<15} {'Products':<9} {'Customers':<10} {'Sales':<6} {'Reports':<8} {'Users':<6} Active")
    click.echo("-" * 72)
    for u in users:
        click.echo(
            f"{u.id:<4} {u.username:<15} {_yes_no(u.can_manage_products):<9} "
            f"{_yes_no(u.can_manage_customers):<10} {_yes_no(u.can_manage_sales):<6} "
            f"{_yes_no(u.can_view_reports):<8} {_yes_no(u.can_manage_users):<6} {_yes_no(u.is_active)}"
        )


@users_group.command("add")
@click.argument("username")
@click.option("--new-password", prompt="New user's password", hide_input=True, confirmation_prompt=True)
@click.option("--grant", multiple=True, type=click.Choice(sorted(CAPABILITY_NAMES)),
              help="Capability to grant (repeatable).")
@pass_app
def users_add(app: AppContext, username, new_password, grant):
    u = UsersController(app.repos).add_user(app.session(), username, new_password, _caps(grant))
    click.echo(f"User #{u.id} ({u.username}) created.")


@users_group.command("edit")
@click.argument("user_id", type=int)
@click.option("--grant", multiple=True, type=click.Choice(sorted(CAPABILITY_NAMES)))
@click.option("--revoke", multiple=True, type=click.Choice(sorted(CAPABILITY_NAMES)))
@click.option("--active/--inactive", "is_active", default=None)
@pass_app
def users_edit(app: AppContext, user_id, grant, revoke, is_active):
    """Grant or revoke capabilities; flags not named are kept."""
    both = sorted(set(grant) & set(revoke))
    if both:
        raise click.UsageError(f"Cannot both grant and revoke: {', '.join(both)}.")
    flags = _caps(grant)
    flags.update({CAPABILITY_NAMES[n]: False for n in revoke})
    u = UsersController(app.repos).edit_permissions(app.session(), user_id, flags, is_active=is_active)
    granted = ", ".join(CAPABILITY_LABELS[c] for c in CAPABILITIES if getattr(u, c)) or "nothing"
    click.echo(f"User #{u.id} ({u.username}) may now: {granted}.")


@users_group.command("deactivate")
@click.argument("user_id", type=int)
@pass_app
def users_deactivate(app: AppContext, user_id):
    u = UsersController(app.repos).deactivate_user(app.session(), user_id)
    click.echo(f"User #{u.id} ({u.username}) deactivated.")


@users_group.command("delete")
@click.argument("user_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@pass_app
def users_delete(app: AppContext, user_id, yes):
    def confirm(user) -> bool:
        return yes or click.confirm(f"Delete user '{user.username}'?", default=False)

    if UsersController(app.repos).delete_user(app.session(), user_id, confirm):
        click.echo(f"User #{user_id} deleted.")
    else:
        click.echo("Deletion cancelled.")


# =============================================================================
# REPORTS
# =============================================================================

@cli.group("reports")
def reports_group():
    """Low stock, sales summary and profit reports."""


@reports_group.command("low-stock")
@click.option("--threshold", default=None, help="Report stock <= N (default: each product's minimum level).")
@pass_app
def reports_low_stock(app: AppContext, threshold):
    products = ReportingController(app.repos).low_stock(app.session(), threshold)
    _echo_products(products)
    click.echo(f"\nTotal low stock items: {len(products)}")


@reports_group.command("sales-summary")
@pass_app
def reports_sales_summary(app: AppContext):
    s = ReportingController(app.repos).sales_summary(app.session())
    click.echo("=== Sales Summary Report ===")
    click.echo(f"Total Transactions: {s.transactions}")
    click.echo(f"Total Units Sold: {s.units}")
    click.echo(f"Total Revenue: {fmt_money(s.revenue)}")
    click.echo(f"Average Sale Value: {fmt_money(s.average)}")


@reports_group.command("profit")
@pass_app
def reports_profit(app: AppContext):
    r = ReportingController(app.repos).profit_analysis(app.session())
    click.echo("=== Profit Analysis ===")
    click.echo(f"Transactions: {r.transactions}")
    click.echo(f"Total Revenue: {fmt_money(r.revenue)}")
    click.echo(f"Total Cost: {fmt_money(r.cost)}")
    click.echo(f"Total Profit: {fmt_money(r.profit)}")
    click.echo(f"Profit Margin: {r.margin_pct:.2f}%")


# =============================================================================
# MAINTENANCE
# =============================================================================

@cli.command("backup")
@pass_app
def backup_cmd(app: AppContext):
    """Copy every data file into backups/backup_YYYYMMDD_HHMMSS/."""
    app.session()
    target = create_backup(app.repos.data_dir, verbose=app.verbose)
    click.echo(f"Backup created successfully: {target.name}")


@cli.command("passwd")
@click.option("--old-password", prompt="Current Password", hide_input=True)
@click.option("--new-password", prompt="New Password", hide_input=True, confirmation_prompt=True)
@pass_app
def passwd_cmd(app: AppContext, old_password, new_password):
    """Change your own password."""
    LoginController(app.repos).change_password(app.session(), old_password, new_password)
    click.echo("Password changed successfully.")


def main():
    cli(prog_name="shop")


if __name__ == "__main__":
    main()
