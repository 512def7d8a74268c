import pytest
from click.testing import CliRunner

from shop_manager.database import open_repositories
from shop_manager.main import cli


@pytest.fixture()
def run(data_dir):
    runner = CliRunner()

    def _run(*args, user="admin", password="admin", input=None):
        base = ["--data-dir", str(data_dir), "--username", user, "--password", password]
        return runner.invoke(cli, [*base, *args], input=input, catch_exceptions=False)

    return _run


def test_first_run_creates_admin_and_lists_nothing(run, data_dir):
    result = run("products", "list")
    assert result.exit_code == 0, result.output
    assert "No products found." in result.output
    assert (data_dir / "users.csv").exists()


def test_product_sale_and_report_flow(run):
    r = run("products", "add", "--name", "Mouse, Wireless", "--category", "Peripherals",
            "--brand", "Logi", "--cost", "10", "--price", "25", "--stock", "5", "--min-stock", "2")
    assert r.exit_code == 0, r.output
    assert "Product #1 added." in r.output

    r = run("customers", "add", "--name", "Ada", "--phone", "555", "--email", "ada@example.com",
            "--address", "1 Way")
    assert "Customer #1 added." in r.output

    r = run("sales", "make", "--product-id", "1", "--customer-id", "1", "--quantity", "3")
    assert r.exit_code == 0, r.output
    assert "Total: 75.00" in r.output

    r = run("products", "search", "wireless")
    assert "Mouse, Wireless" in r.output
    assert " LOW" in r.output  # 2 left, minimum 2

    r = run("reports", "sales-summary")
    assert "Total Transactions: 1" in r.output
    assert "Total Revenue: 75.00" in r.output

    r = run("reports", "profit")
    assert "Total Profit: 45.00" in r.output


def test_domain_error_exits_1_with_message(run):
    r = run("products", "adjust-stock", "7", "1")
    assert r.exit_code == 1
    assert "Error: Product #7 not found." in r.output
    assert "Traceback" not in r.output


def test_bad_login_exits_1(run):
    r = run("products", "list", password="nope")
    assert r.exit_code == 1
    assert "Error: Invalid username or password, or account is inactive." in r.output


def test_permission_denied_for_restricted_user(run):
    r = run("users", "add", "clerk", "--new-password", "secret", "--grant", "sales")
    assert r.exit_code == 0, r.output

    r = run("reports", "low-stock", user="clerk", password="secret")
    assert r.exit_code == 1
    assert "Permission denied: you don't have permission to view reports." in r.output


def test_repair_status_flow(run):
    run("customers", "add", "--name", "Ada", "--phone", "555", "--email", "a@x.io", "--address", "1 Way")
    r = run("repairs", "add", "--customer-id", "1", "--device", "Laptop", "--problem", "No power",
            "--estimate", "40")
    assert "Repair #1 received." in r.output

    r = run("repairs", "status", "1", "Completed")
    assert r.exit_code == 0, r.output
    assert "Repair #1 is now Completed." in r.output

    r = run("repairs", "status", "1", "Lost")
    assert r.exit_code == 2  # rejected by click before any I/O


def test_user_edit_and_delete(run):
    run("users", "add", "bob", "--new-password", "secret")
    r = run("users", "edit", "2", "--grant", "reports", "--grant", "products")
    assert "may now: manage products, view reports." in r.output

    r = run("users", "delete", "1", "--yes")
    assert r.exit_code == 1
    assert "cannot delete your own account" in r.output

    r = run("users", "delete", "2", input="n\n")
    assert "Deletion cancelled." in r.output
    r = run("users", "delete", "2", "--yes")
    assert "User #2 deleted." in r.output


def test_passwd_and_backup(run, data_dir):
    r = run("passwd", "--old-password", "admin", "--new-password", "better")
    assert r.exit_code == 0, r.output
    assert run("products", "list").exit_code == 1
    r = run("backup", password="better")
    assert r.exit_code == 0, r.output
    assert "Backup created successfully: backup_" in r.output
    assert any((data_dir / "backups").iterdir())


def test_credentials_are_prompted_when_missing(data_dir):
    r = CliRunner().invoke(cli, ["--data-dir", str(data_dir), "products", "list"], input="admin\nadmin\n")
    assert r.exit_code == 0, r.output
    assert "No products found." in r.output


def test_overlong_password_is_reported_not_raised(run):
    r = run("users", "add", "bob", "--new-password", "x" * 80)
    assert r.exit_code == 1
    assert "Error: Password must be at most 72 bytes long." in r.output
    assert "bob" not in run("users", "list").output


def test_edit_rejects_grant_and_revoke_of_same_capability(run, data_dir):
    run("users", "add", "bob", "--new-password", "secret", "--grant", "reports")
    r = run("users", "edit", "2", "--grant", "reports", "--revoke", "reports")
    assert r.exit_code == 2
    assert "Cannot both grant and revoke: reports." in r.output
    assert open_repositories(data_dir).users.get(2).can_view_reports
