from pathlib import Path

import pytest
from prometheus_client import REGISTRY
from sqlalchemy import inspect, text

from rowcycle.bootstrap import bootstrap_schema, check_storage
from rowcycle.db import Database, count_records, insert_records


@pytest.fixture()
def database(tmp_path: Path):
    db = Database(f"sqlite:///{tmp_path / 'rowcycle-bootstrap-test.db'}")
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture()
def unreachable_database(tmp_path: Path):
    db = Database(f"sqlite:///{tmp_path / 'missing-dir' / 'rowcycle.db'}")
    try:
        yield db
    finally:
        db.dispose()


def test_bootstrap_creates_table_with_expected_shape(database):
    assert bootstrap_schema(database) is True

    inspector = inspect(database.engine)
    assert inspector.get_table_names() == ["tbl_test"]

    columns = {column["name"]: column for column in inspector.get_columns("tbl_test")}
    assert set(columns) == {"id", "data"}
    assert columns["data"]["type"].length == 255
    assert inspector.get_pk_constraint("tbl_test")["constrained_columns"] == ["id"]


def test_bootstrap_twice_is_a_noop(database):
    assert bootstrap_schema(database) is True
    insert_records(database, ["kept"])

    assert bootstrap_schema(database) is True

    assert inspect(database.engine).get_table_names() == ["tbl_test"]
    assert count_records(database) == 1


def test_bootstrap_tolerates_preexisting_table(database):
    with database.session() as session:
        session.execute(text("CREATE TABLE tbl_test (id INTEGER PRIMARY KEY AUTOINCREMENT, data VARCHAR(255))"))
        session.execute(text("INSERT INTO tbl_test (data) VALUES ('made elsewhere')"))

    assert bootstrap_schema(database) is True
    assert count_records(database) == 1


def test_bootstrap_failure_is_reported_not_raised(unreachable_database, caplog):
    before = REGISTRY.get_sample_value("rowcycle_bootstrap_failures_total") or 0.0

    with caplog.at_level("ERROR", logger="rowcycle.bootstrap"):
        assert bootstrap_schema(unreachable_database) is False

    assert REGISTRY.get_sample_value("rowcycle_bootstrap_failures_total") == before + 1
    assert any(getattr(record, "event", None) == "bootstrap_failed" for record in caplog.records)


def test_check_storage(database, unreachable_database):
    assert check_storage(database) is True
    assert check_storage(unreachable_database) is False


def test_ids_are_assigned_by_storage(database):
    bootstrap_schema(database)
    insert_records(database, ["a", "b", "c"])

    with database.session() as session:
        ids = session.execute(text("SELECT id FROM tbl_test ORDER BY id")).scalars().all()

    assert ids == [1, 2, 3]


def test_insert_rejects_overlong_data(database):
    bootstrap_schema(database)

    with pytest.raises(ValueError):
        insert_records(database, ["ok", "x" * 256])

    assert count_records(database) == 0


def test_insert_nothing(database):
    bootstrap_schema(database)
    assert insert_records(database, []) == 0
