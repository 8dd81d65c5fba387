"""
Path search over a FamilyGraph.

All searches share one contract: given a graph, a start id and a goal id,
return the ids from start to goal inclusive, or an empty list when there is
no path or either id is not in the graph. Ids may be given as ints or their
string forms. The graph is only read, so searches can run concurrently on
the same snapshot.
"""

import heapq
import itertools
import logging
import math
from collections import deque
from collections.abc import Callable

from errors import InvalidAlgorithm
from graph import FamilyGraph
from models import Algorithm, RelationType, normalize_id

logger = logging.getLogger(__name__)

SearchFn = Callable[[FamilyGraph, object, object], list[int]]


def _resolve(graph: FamilyGraph, person_id) -> int | None:
    """Canonical int id if it names a person in the graph, else None."""
    try:
        pid = normalize_id(person_id)
    except LookupError:
        return None
    return pid if pid in graph else None


def depth_first_search(graph: FamilyGraph, start_id, goal_id) -> list[int]:
    """
    First path found by depth-first exploration, following neighbors in
    insertion order. Not necessarily the shortest.
    """
    start, goal = _resolve(graph, start_id), _resolve(graph, goal_id)
    if start is None or goal is None:
        return []

    path = [start]
    if start == goal:
        return path

    visited = {start}
    # One neighbor iterator per id on the current path
    stack = [iter(graph.neighbor_ids(start))]

    while stack:
        for neighbor in stack[-1]:
            if neighbor in visited:
                continue
            visited.add(neighbor)
            path.append(neighbor)
            if neighbor == goal:
                logger.debug("[DFS] %s -> %s: %s", start, goal, path)
                return path
            stack.append(iter(graph.neighbor_ids(neighbor)))
            break
        else:
            # Dead end: backtrack
            stack.pop()
            path.pop()

    logger.debug("[DFS] %s -> %s: no path", start, goal)
    return []


def breadth_first_search(graph: FamilyGraph, start_id, goal_id) -> list[int]:
    """Path with the fewest relations, found by level-order exploration."""
    start, goal = _resolve(graph, start_id), _resolve(graph, goal_id)
    if start is None or goal is None:
        return []

    previous: dict[int, int | None] = {start: None}  # doubles as the visited set
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == goal:
            path = _walk_back(previous, goal)
            logger.debug("[BFS] %s -> %s: %s", start, goal, path)
            return path

        for neighbor in graph.neighbor_ids(current):
            # Mark on enqueue so nobody is queued twice
            if neighbor not in previous:
                previous[neighbor] = current
                queue.append(neighbor)

    logger.debug("[BFS] %s -> %s: no path", start, goal)
    return []


def uniform_weight(relation_type: RelationType) -> float:
    return 1


def dijkstra_search(
    graph: FamilyGraph,
    start_id,
    goal_id,
    edge_weight: Callable[[RelationType], float] = uniform_weight,
) -> list[int]:
    """
    Lowest-cost path by Dijkstra's algorithm.

    With the default uniform weight the result has the same number of hops as
    breadth_first_search. `edge_weight` maps a relation type to a
    non-negative cost; between two people the cheapest relation counts. A
    negative cost raises ValueError.
    """
    start, goal = _resolve(graph, start_id), _resolve(graph, goal_id)
    if start is None or goal is None:
        return []

    distances: dict[int, float] = {pid: math.inf for pid in graph}
    distances[start] = 0
    previous: dict[int, int | None] = {start: None}
    visited: set[int] = set()

    # Counter breaks distance ties in insertion order
    counter = itertools.count()
    heap = [(0, next(counter), start)]

    while heap:
        distance, _, current = heapq.heappop(heap)
        if current in visited:
            continue  # stale entry
        if current == goal:
            path = _walk_back(previous, goal)
            logger.debug("[Dijkstra] %s -> %s: %s (cost %s)", start, goal, path, distance)
            return path
        visited.add(current)

        for neighbor, relation_types in _grouped_neighbors(graph, current).items():
            if neighbor in visited:
                continue
            weight = min(edge_weight(t) for t in relation_types)
            if weight < 0:
                raise ValueError(f"Negative edge weight {weight} between {current} and {neighbor}")
            alt = distance + weight
            if alt < distances[neighbor]:
                distances[neighbor] = alt
                previous[neighbor] = current
                heapq.heappush(heap, (alt, next(counter), neighbor))

    logger.debug("[Dijkstra] %s -> %s: no path", start, goal)
    return []


ALGORITHMS: dict[Algorithm, SearchFn] = {
    Algorithm.DFS: depth_first_search,
    Algorithm.BFS: breadth_first_search,
    Algorithm.DIJKSTRA: dijkstra_search,
}


def parse_algorithm(name) -> Algorithm:
    if isinstance(name, Algorithm):
        return name
    try:
        return Algorithm(str(name).strip().lower())
    except ValueError:
        raise InvalidAlgorithm(name) from None


def get_algorithm(name) -> SearchFn:
    """Search function for a selector ("dfs", "bfs" or "dijkstra")."""
    return ALGORITHMS[parse_algorithm(name)]


def _grouped_neighbors(graph: FamilyGraph, person_id: int) -> dict[int, list[RelationType]]:
    grouped: dict[int, list[RelationType]] = {}
    for neighbor, relation_type in graph.neighbors(person_id):
        grouped.setdefault(neighbor, []).append(relation_type)
    return grouped


def _walk_back(previous: dict[int, int | None], goal: int) -> list[int]:
    path = []
    step: int | None = goal
    while step is not None:
        path.append(step)
        step = previous[step]
    path.reverse()
    return path
