import os
from pathlib import Path

from .constants import BACKUP_DIR_NAME, LOG_DIR_NAME

DATA_DIR_ENV = "SHOP_DATA_DIR"

# Relative to the working directory, where earlier releases kept their files
DATA_DIR = Path(os.environ.get(DATA_DIR_ENV, "data"))


def resolve_data_dir(override: str | os.PathLike | None = None) -> Path:
    """Return the absolute data directory, creating it if needed."""
    path = Path(override) if override else DATA_DIR
    path = path.expanduser().resolve()
    path.mkdir(parents=True, exist_ok=True)
    return path


def backup_root(data_dir: Path) -> Path:
    return data_dir / BACKUP_DIR_NAME


def log_dir(data_dir: Path) -> Path:
    return data_dir / LOG_DIR_NAME
