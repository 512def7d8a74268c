import pytest

from shop_manager.errors import NotFoundError, PermissionDeniedError, ValidationError
from shop_manager.modules.customer import CustomerController
from shop_manager.modules.product import ProductController


def test_create_product_allocates_ids(repos):
    a = repos.products.create("Mouse", "Peripherals", "Logi", "10", "25", "5", "2")
    b = repos.products.create("Keyboard", "Peripherals", "Logi", 20, 45, 3, 1)
    assert (a.id, b.id) == (1, 2)
    assert a.cost_price == 10.0 and a.stock == 5
    assert [p.name for p in repos.products.list_products()] == ["Mouse", "Keyboard"]


def test_product_name_with_comma_survives_round_trip(repos, data_dir):
    p = repos.products.create("Mouse, Wireless", "Peripherals", "Logi", 10, 25, 5, 2)
    line = (data_dir / "products.csv").read_text(encoding="utf-8").strip()
    assert line == '1,"Mouse, Wireless",Peripherals,Logi,10.00,25.00,5,2'
    assert repos.products.get(p.id).name == "Mouse, Wireless"


@pytest.mark.parametrize(
    "kwargs, message",
    [
        (dict(name="  "), "Product name"),
        (dict(cost_price="abc"), "Cost price"),
        (dict(cost_price=-1), "Cost price"),
        (dict(sell_price=5), "below cost"),
        (dict(stock=10_001), "Stock quantity"),
        (dict(min_stock_level="1.5"), "Minimum stock level"),
        (dict(brand="two\nlines"), "single line"),
    ],
)
def test_create_product_validation(repos, data_dir, kwargs, message):
    args = dict(name="Mouse", category="Peripherals", brand="Logi",
                cost_price=10, sell_price=25, stock=5, min_stock_level=2)
    args.update(kwargs)
    with pytest.raises(ValidationError, match=message):
        repos.products.create(**args)
    assert not (data_dir / "products.csv").exists()


def test_search_is_case_insensitive_over_name_category_brand(repos):
    repos.products.create("Mouse", "Peripherals", "Logi", 10, 25, 5, 2)
    repos.products.create("SSD 1TB", "Storage", "Samsung", 60, 90, 4, 1)
    assert [p.name for p in repos.products.search("mou")] == ["Mouse"]
    assert [p.name for p in repos.products.search("STORAGE")] == ["SSD 1TB"]
    assert [p.name for p in repos.products.search("sams")] == ["SSD 1TB"]
    assert repos.products.search("nothing") == []


def test_adjust_stock_adds_and_clamps_at_zero(repos, seeded):
    pid = seeded["product"].id
    assert repos.products.adjust_stock(pid, 5).stock == 15
    assert repos.products.adjust_stock(pid, -100).stock == 0
    assert repos.products.get(pid).stock == 0


def test_adjust_stock_unknown_product_leaves_file_untouched(repos, seeded, data_dir):
    path = data_dir / "products.csv"
    before = path.read_bytes()
    with pytest.raises(NotFoundError):
        repos.products.adjust_stock(99, 1)
    assert path.read_bytes() == before


def test_low_flag(repos):
    p = repos.products.create("Fan", "Cooling", "Noctua", 10, 20, 2, 2)
    assert p.is_low


# ---------- controllers ----------

def test_product_controller_gates_mutations(repos, seeded, clerk_session, admin_session):
    ctl = ProductController(repos)
    # browsing needs no capability
    assert len(ctl.list_products(clerk_session)) == 1
    assert len(ctl.search_products(clerk_session, "usb")) == 1

    with pytest.raises(PermissionDeniedError) as exc:
        ctl.add_product(clerk_session, "X", "Y", "Z", 1, 2, 3, 1)
    assert exc.value.capability == "can_manage_products"
    assert "manage products" in str(exc.value)
    with pytest.raises(PermissionDeniedError):
        ctl.adjust_stock(clerk_session, seeded["product"].id, 1)

    assert ctl.adjust_stock(admin_session, seeded["product"].id, "-3").stock == 7
    assert ctl.add_product(admin_session, "X", "Y", "Z", 1, 2, 3, 1).id == 2


def test_customer_repo_and_controller(repos, clerk_session, admin_session):
    ctl = CustomerController(repos)
    with pytest.raises(PermissionDeniedError):
        ctl.add_customer(clerk_session, "Bob", "555", "bob@example.com", "1 Road")
    with pytest.raises(ValidationError, match="Email"):
        ctl.add_customer(admin_session, "Bob", "555", "", "1 Road")

    c = ctl.add_customer(admin_session, "Bob, Jr.", "555-0102", "bob@example.com", "1 Road")
    assert c.id == 1
    assert repos.customers.get(1).name == "Bob, Jr."
    assert [x.id for x in ctl.search_customers(clerk_session, "0102")] == [1]
    assert [x.id for x in ctl.search_customers(clerk_session, "BOB@")] == [1]
    assert len(ctl.list_customers(clerk_session)) == 1
    with pytest.raises(NotFoundError):
        repos.customers.require(42)
