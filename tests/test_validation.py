"""Test integrity checks."""

from graph import build_graph
from models import Person, Relation, RelationType
from validation import validate_graph


def person(pid, birth_date=None):
    return Person(id=pid, name=f"P{pid}", birth_date=birth_date)


def test_cycle_is_reported():
    relations = [
        Relation(1, 2, RelationType.CHILD),
        Relation(2, 3, RelationType.CHILD),
        Relation(3, 1, RelationType.CHILD),
    ]
    warnings = validate_graph(build_graph([person(1), person(2), person(3)], relations))
    assert len(warnings) == 1
    assert warnings[0].startswith("Cycle detected")


def test_spouse_edges_are_not_lineage():
    relations = [Relation(1, 2, RelationType.SPOUSE)]
    assert validate_graph(build_graph([person(1), person(2)], relations)) == []


def test_child_born_before_parent():
    graph = build_graph(
        [person(1, "1990-01-01"), person(2, "1980-01-01")],
        [Relation(1, 2, RelationType.CHILD)],
    )
    assert validate_graph(graph) == ["Impossible: P2 born before parent P1"]


def test_young_parent_is_suspicious():
    graph = build_graph(
        [person(1, "1950-01-01"), person(2, "1958-06-01")],
        [Relation(1, 2, RelationType.CHILD)],
    )
    warnings = validate_graph(graph)
    assert len(warnings) == 1
    assert warnings[0].startswith("Suspicious: P1 was less than 12 years old")


def test_missing_dates_are_ignored():
    graph = build_graph([person(1), person(2, "1980-01-01")], [Relation(1, 2, RelationType.CHILD)])
    assert validate_graph(graph) == []
