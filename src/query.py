"""Query facade: the entry point hosts use to ask kinship questions."""

import logging
import threading
from collections import OrderedDict

from errors import NotFound, UnknownPerson
from graph import FamilyGraph, build_graph_from_snapshot
from models import Algorithm, PathResult, PathStep, Person, RelationType, normalize_id
from store import EntityStore
from traversal import get_algorithm, parse_algorithm
from validation import validate_graph

logger = logging.getLogger(__name__)

# Graphs of recent store versions kept for describing earlier results
GRAPH_HISTORY = 8


def find_path(graph: FamilyGraph, start_id, goal_id, algorithm=Algorithm.BFS) -> PathResult:
    """
    Run a path search against an explicit graph snapshot.

    Raises InvalidAlgorithm for an unknown selector and UnknownPerson for ids
    that are not person ids at all. A well-formed id that is absent from the
    graph simply yields an empty path.
    """
    selected = parse_algorithm(algorithm)
    start, goal = normalize_id(start_id), normalize_id(goal_id)
    path = get_algorithm(selected)(graph, start, goal)
    return PathResult(
        algorithm=selected,
        start_id=start,
        goal_id=goal,
        path=tuple(path),
        version=graph.version,
    )


def describe_path(graph: FamilyGraph, path) -> list[PathStep]:
    """
    Name each person on a path and how they relate to the previous one.

    The relation reads from the previous person's point of view: "child"
    means this step is a child of the previous step.

    Raises UnknownPerson if a person on the path is not in the graph and
    NotFound if two consecutive people are not related in it.
    """
    steps: list[PathStep] = []
    previous = None
    for pid in path:
        if pid not in graph:
            raise UnknownPerson(pid)
        relation = None
        if previous is not None:
            relation = _relation_label(graph, previous, pid)
            if not relation:
                raise NotFound(f"No relation between {previous} and {pid}", person_id=pid)
        steps.append(PathStep(person_id=pid, name=graph.person(pid).name, relation=relation))
        previous = pid
    return steps


def _relation_label(graph: FamilyGraph, u: int, v: int) -> str:
    labels = []
    for data in graph.edges_between(u, v):
        if data["relation_type"] is RelationType.SPOUSE:
            labels.append("spouse")
        else:
            labels.append("child" if data["forward"] else "parent")
    return "/".join(sorted(set(labels)))


class KinshipQuery:
    """
    Kinship questions over an entity store.

    Keeps one FamilyGraph per store version; a query made after a mutation
    rebuilds it from a fresh snapshot. Queries already running keep the graph
    they started with. The graphs of the last GRAPH_HISTORY versions stay
    around so a PathResult is described against the graph it was found on.

    Usage:
        queries = KinshipQuery(store)
        result = queries.find_path(3, 4, "bfs")
        if result.found:
            print(result.path)
    """

    def __init__(self, store: EntityStore):
        self.store = store
        self._graphs: OrderedDict[int, FamilyGraph] = OrderedDict()
        self._lock = threading.Lock()

    def graph(self) -> FamilyGraph:
        with self._lock:
            graph = self._graphs.get(self.store.version)
            if graph is None:
                snapshot = self.store.snapshot()
                logger.debug("Rebuilding family graph for version %d", snapshot.version)
                graph = build_graph_from_snapshot(snapshot)
                self._graphs[snapshot.version] = graph
                while len(self._graphs) > GRAPH_HISTORY:
                    self._graphs.popitem(last=False)
            return graph

    def find_path(self, start_id, goal_id, algorithm=Algorithm.BFS) -> PathResult:
        result = find_path(self.graph(), start_id, goal_id, algorithm)
        logger.info(
            "%s path %d -> %d: %s",
            result.algorithm.value,
            result.start_id,
            result.goal_id,
            list(result.path) if result.found else "none",
        )
        return result

    def describe_path(self, result: PathResult) -> list[PathStep]:
        """
        Describe a result against the graph it was found on.

        When that graph has aged out of the history, the current graph is used
        and UnknownPerson or NotFound is raised if the path no longer holds.
        """
        with self._lock:
            graph = self._graphs.get(result.version)
        if graph is None:
            graph = self.graph()
        return describe_path(graph, result.path)

    # ─────────────────────────────────────────
    # Derived relatives
    # ─────────────────────────────────────────

    def parents(self, person_id) -> list[Person]:
        graph, pid = self._lookup(person_id)
        return [graph.person(p) for p in graph.parents(pid)]

    def children(self, person_id) -> list[Person]:
        graph, pid = self._lookup(person_id)
        return [graph.person(c) for c in graph.children(pid)]

    def spouses(self, person_id) -> list[Person]:
        graph, pid = self._lookup(person_id)
        return [graph.person(s) for s in graph.spouses(pid)]

    def siblings(self, person_id) -> list[Person]:
        """People sharing at least one parent with person_id (half-siblings included)."""
        graph, pid = self._lookup(person_id)
        found: dict[int, None] = {}
        for parent in graph.parents(pid):
            for child in graph.children(parent):
                if child != pid:
                    found[child] = None
        return [graph.person(s) for s in found]

    def validate(self) -> list[str]:
        return validate_graph(self.graph())

    def _lookup(self, person_id) -> tuple[FamilyGraph, int]:
        graph = self.graph()
        pid = normalize_id(person_id)
        if pid not in graph:
            raise UnknownPerson(person_id)
        return graph, pid
