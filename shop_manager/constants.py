# shop_manager/constants.py
# ---- Data files (one per entity, under the data dir) ----
PRODUCTS_FILE = "products.csv"
CUSTOMERS_FILE = "customers.csv"
SALES_FILE = "sales.csv"
REPAIRS_FILE = "repairs.csv"
ASSEMBLIES_FILE = "assemblies.csv"
USERS_FILE = "users.csv"

BACKUP_DIR_NAME = "backups"
BACKUP_PREFIX = "backup_"
LOG_DIR_NAME = "logs"

# ---- Timestamps ----
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
BACKUP_STAMP_FORMAT = "%Y%m%d_%H%M%S"

# ---- Repair / assembly workflows ----
REPAIR_STATUSES = ("Received", "In Progress", "Completed", "Collected")
REPAIR_INITIAL_STATUS = "Received"
REPAIR_TERMINAL_STATUSES = ("Completed",)

ASSEMBLY_STATUSES = ("Pending", "Assembled", "Delivered")
ASSEMBLY_INITIAL_STATUS = "Pending"

# ---- Users ----
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"
MIN_PASSWORD_LENGTH = 4
MAX_PASSWORD_BYTES = 72  # bcrypt input limit

CAPABILITIES = (
    "can_manage_products",
    "can_manage_customers",
    "can_manage_sales",
    "can_view_reports",
    "can_manage_users",
)

# ---- Input ranges ----
MAX_QUANTITY = 10_000
