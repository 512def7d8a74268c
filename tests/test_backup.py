import json
import re

import pytest

from shop_manager.errors import ValidationError
from shop_manager.modules.backup_restore import create_backup


def test_backup_copies_every_data_file(repos, seeded, data_dir):
    target = create_backup(data_dir)

    assert target.parent == data_dir / "backups"
    assert re.fullmatch(r"backup_\d{8}_\d{6}", target.name)
    assert sorted(p.name for p in target.iterdir()) == ["customers.csv", "products.csv"]
    for name in ("customers.csv", "products.csv"):
        assert (target / name).read_bytes() == (data_dir / name).read_bytes()


def test_backups_in_the_same_second_do_not_collide(repos, seeded, data_dir):
    first = create_backup(data_dir)
    second = create_backup(data_dir)
    assert first != second
    assert first.exists() and second.exists()


def test_backup_to_custom_root(repos, seeded, data_dir, tmp_path):
    target = create_backup(data_dir, tmp_path / "elsewhere")
    assert target.parent == tmp_path / "elsewhere"


def test_backup_with_no_data_files(data_dir):
    with pytest.raises(ValidationError, match="No data files"):
        create_backup(data_dir)


def test_backup_writes_json_event_log(repos, seeded, data_dir):
    create_backup(data_dir)
    log_file = data_dir / "logs" / "backup.log"
    events = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    phases = [e["extra"]["phase"] for e in events]
    assert phases[0] == "preflight"
    assert phases[-1] == "done"
    assert events[-1]["extra"]["op"] == "backup"
    assert events[-1]["extra"]["files"] == ["customers.csv", "products.csv"]
