"""Test the kinship query facade."""

import threading

import pytest

from errors import InvalidAlgorithm, NotFound, UnknownPerson
from models import Algorithm, PathStep
from query import GRAPH_HISTORY, KinshipQuery, describe_path, find_path


class TestFindPath:
    def test_sibling_path(self, queries):
        result = queries.find_path(3, 4, "bfs")
        assert result.found
        assert result.path in ((3, 1, 4), (3, 2, 4))
        assert result.hops == 2
        assert result.algorithm is Algorithm.BFS

    @pytest.mark.parametrize("algorithm", ["dfs", "bfs", "dijkstra"])
    def test_same_person(self, queries, algorithm):
        assert queries.find_path(2, 2, algorithm).path == (2,)

    def test_absent_goal_is_not_an_error(self, queries):
        result = queries.find_path(3, 99, "dijkstra")
        assert not result.found
        assert result.path == ()
        assert result.hops is None

    def test_no_relationship(self, family, queries):
        loner = family.add_person("Loner")
        result = queries.find_path(1, loner.id)
        assert not result.found

    def test_string_ids(self, queries):
        result = queries.find_path("3", " 4 ", Algorithm.DIJKSTRA)
        assert (result.start_id, result.goal_id) == (3, 4)
        assert len(result.path) == 3

    def test_unknown_algorithm(self, queries):
        with pytest.raises(InvalidAlgorithm):
            queries.find_path(3, 4, "astar")

    def test_malformed_id(self, queries):
        with pytest.raises(UnknownPerson):
            queries.find_path("three", 4)

    def test_default_algorithm_is_bfs(self, queries):
        assert queries.find_path(1, 4).algorithm is Algorithm.BFS

    def test_explicit_graph(self, queries):
        result = find_path(queries.graph(), 4, 2, "dfs")
        assert result.path[0] == 4 and result.path[-1] == 2


class TestGraphCache:
    def test_graph_is_reused_until_store_changes(self, family, queries):
        first = queries.graph()
        assert queries.graph() is first

        family.add_person("E")
        rebuilt = queries.graph()
        assert rebuilt is not first
        assert len(rebuilt) == 5

    def test_held_graph_is_a_stable_snapshot(self, family, queries):
        held = queries.graph()
        family.remove_person(1)

        assert 1 in held
        assert 1 not in queries.graph()
        assert queries.find_path(3, 4).path == (3, 2, 4)

    def test_mutations_are_visible_to_the_next_query(self, family, queries):
        assert queries.find_path(1, 4).hops == 1
        family.remove_relation(1, 4, "child")
        assert queries.find_path(1, 4).path == (1, 2, 4)

    def test_concurrent_queries(self, queries):
        results = []

        def worker(algorithm):
            results.append(queries.find_path(3, 4, algorithm).hops)

        threads = [
            threading.Thread(target=worker, args=(name,))
            for name in ["bfs", "dijkstra"] * 10
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [2] * 20


class TestDescribePath:
    def test_steps_name_each_relation(self, queries):
        result = queries.find_path(3, 4, "bfs")
        assert queries.describe_path(result) == [
            PathStep(person_id=3, name="C", relation=None),
            PathStep(person_id=1, name="A", relation="parent"),
            PathStep(person_id=4, name="D", relation="child"),
        ]

    def test_spouse_step(self, queries):
        steps = queries.describe_path(queries.find_path(1, 2))
        assert [s.relation for s in steps] == [None, "spouse"]

    def test_empty_path(self, queries):
        assert queries.describe_path(queries.find_path(1, 99)) == []

    def test_result_outlives_removed_person(self, family, queries):
        result = queries.find_path(3, 4, "bfs")
        family.remove_person(result.path[1])

        assert result.version is not None
        assert [s.relation for s in queries.describe_path(result)] == [None, "parent", "child"]
        with pytest.raises(UnknownPerson):
            describe_path(queries.graph(), result.path)

    def test_result_outlives_removed_relation(self, family, queries):
        result = queries.find_path(3, 4, "bfs")
        family.remove_relation(1, 3, "child")

        assert queries.describe_path(result)[1].name == "A"
        with pytest.raises(NotFound):
            describe_path(queries.graph(), result.path)

    def test_aged_out_result_is_checked_against_current_graph(self, family, queries):
        result = queries.find_path(3, 4, "bfs")
        family.remove_person(result.path[1])
        for i in range(GRAPH_HISTORY):
            family.add_person(f"Filler {i}")
            queries.graph()

        with pytest.raises(UnknownPerson):
            queries.describe_path(result)


class TestRelatives:
    def test_parents_children_spouses(self, queries):
        assert [p.name for p in queries.parents(3)] == ["A", "B"]
        assert [p.name for p in queries.children(2)] == ["C", "D"]
        assert [p.name for p in queries.spouses(2)] == ["A"]

    def test_siblings_are_derived_from_shared_parents(self, family, queries):
        half = family.add_child([1], name="E")
        assert [p.name for p in queries.siblings(3)] == ["D", "E"]
        assert [p.name for p in queries.siblings(half.id)] == ["C", "D"]
        assert queries.siblings(1) == []

    def test_unknown_person(self, queries):
        with pytest.raises(UnknownPerson):
            queries.parents(99)


class TestValidate:
    def test_clean_family(self, queries):
        assert queries.validate() == []

    def test_reports_impossible_birth(self, family):
        family.update_person(3, birth_date_string="1940")
        warnings = KinshipQuery(family).validate()
        assert any("C born before parent A" in w for w in warnings)
