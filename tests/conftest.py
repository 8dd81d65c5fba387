"""Pytest fixtures for kinship engine tests."""

import pytest

from query import KinshipQuery
from store import EntityStore


@pytest.fixture
def store():
    """Empty entity store."""
    return EntityStore()


@pytest.fixture
def family(store):
    """
    A and B are married and are the parents of C and D.

    Ids: A=1, B=2, C=3, D=4.
    """
    a = store.add_person("A", gender="M", birth_date_string="1950")
    b = store.add_person("B", gender="F", birth_date_string="1952")
    c = store.add_person("C", gender="F", birth_date_string="1980")
    d = store.add_person("D", gender="M", birth_date_string="1983")
    store.add_relation(a.id, b.id, "spouse")
    store.add_relation(a.id, c.id, "child")
    store.add_relation(a.id, d.id, "child")
    store.add_relation(b.id, c.id, "child")
    store.add_relation(b.id, d.id, "child")
    return store


@pytest.fixture
def queries(family):
    """Query facade over the family fixture."""
    return KinshipQuery(family)
