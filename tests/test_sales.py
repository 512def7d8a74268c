import pytest

from shop_manager.errors import NotFoundError, PermissionDeniedError, ValidationError
from shop_manager.modules.sales import SalesController


def test_sale_records_total_and_decrements_stock(repos, seeded, admin_session):
    ctl = SalesController(repos)
    sale = ctl.make_sale(admin_session, seeded["product"].id, seeded["customer"].id, 3)

    assert sale.id == 1
    assert sale.quantity == 3
    assert sale.total_price == 29.97
    assert sale.cashier == "admin"
    assert repos.products.get(seeded["product"].id).stock == 7

    stored = repos.sales.get(1)
    assert stored.total_price == 29.97
    assert stored.date == sale.date


def test_sale_line_format(repos, seeded, data_dir):
    repos.sales.record_sale(seeded["product"].id, seeded["customer"].id, 2, "clerk", date="2024-05-01 10:00:00")
    line = (data_dir / "sales.csv").read_text(encoding="utf-8").strip()
    assert line == "1,1,1,2,19.98,2024-05-01 10:00:00,clerk"


def test_sale_of_entire_stock_is_allowed(repos, seeded, admin_session):
    SalesController(repos).make_sale(admin_session, seeded["product"].id, seeded["customer"].id, 10)
    assert repos.products.get(seeded["product"].id).stock == 0


@pytest.mark.parametrize("qty", [0, -1, 11, "two"])
def test_bad_quantity_changes_nothing(repos, seeded, admin_session, data_dir, qty):
    products_before = (data_dir / "products.csv").read_bytes()
    with pytest.raises(ValidationError):
        SalesController(repos).make_sale(admin_session, seeded["product"].id, seeded["customer"].id, qty)
    assert not (data_dir / "sales.csv").exists()
    assert (data_dir / "products.csv").read_bytes() == products_before


def test_unknown_product_or_customer(repos, seeded, admin_session):
    ctl = SalesController(repos)
    with pytest.raises(NotFoundError, match="Product"):
        ctl.make_sale(admin_session, 99, seeded["customer"].id, 1)
    with pytest.raises(NotFoundError, match="Customer"):
        ctl.make_sale(admin_session, seeded["product"].id, 99, 1)


def test_sales_need_capability(repos, seeded, clerk_session, data_dir):
    ctl = SalesController(repos)
    with pytest.raises(PermissionDeniedError):
        ctl.make_sale(clerk_session, seeded["product"].id, seeded["customer"].id, 1)
    with pytest.raises(PermissionDeniedError):
        ctl.list_sales(clerk_session)
    assert not (data_dir / "sales.csv").exists()


def test_list_sales_with_revenue(repos, seeded, admin_session):
    ctl = SalesController(repos)
    ctl.make_sale(admin_session, seeded["product"].id, seeded["customer"].id, 3)
    ctl.make_sale(admin_session, seeded["product"].id, seeded["customer"].id, 1)
    listing = ctl.list_sales(admin_session)
    assert [s.id for s in listing.sales] == [1, 2]
    assert listing.total_revenue == 39.96
