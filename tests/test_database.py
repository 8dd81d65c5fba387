"""Test SQLite snapshot storage."""

import pytest

from database import create_database, load_store, store_snapshot


@pytest.fixture
def conn(tmp_path):
    conn = create_database(tmp_path / "family_tree.db")
    yield conn
    conn.close()


def test_round_trip(conn, family):
    family.update_person(1, photo="photos/a.jpg", details="founder")
    store_snapshot(conn, family.snapshot())

    loaded = load_store(conn)
    assert loaded.people() == family.people()
    assert loaded.relations() == family.relations()


def test_store_snapshot_replaces_previous_contents(conn, family):
    store_snapshot(conn, family.snapshot())
    family.remove_person(2)
    store_snapshot(conn, family.snapshot())

    loaded = load_store(conn)
    assert len(loaded.people()) == 3
    assert len(loaded.relations()) == 2


def test_removed_ids_stay_retired(conn, family):
    family.remove_person(4)
    store_snapshot(conn, family.snapshot())

    loaded = load_store(conn)
    assert loaded.add_person("E").id == 5


def test_empty_database(conn):
    store = load_store(conn)
    assert store.people() == []
    assert store.add_person("First").id == 1
