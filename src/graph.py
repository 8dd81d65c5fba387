"""NetworkX graph building for kinship traversal."""

import logging
from collections.abc import Iterable

import networkx as nx

from models import Person, Relation, RelationType, Snapshot

logger = logging.getLogger(__name__)


class FamilyGraph:
    """
    Read-only adjacency view over a frozen MultiDiGraph.

    Every relation is stored as two edges, `from -> to` with forward=True and
    the mirror `to -> from` with forward=False, both carrying the relation
    type. Neighbors are reported in insertion order.
    """

    def __init__(self, G: nx.MultiDiGraph, version: int | None = None, skipped=()):
        self.G = nx.freeze(G)
        self.version = version
        self.skipped: tuple[Relation, ...] = tuple(skipped)

    def __contains__(self, person_id) -> bool:
        return person_id in self.G

    def __len__(self) -> int:
        return self.G.number_of_nodes()

    def __iter__(self):
        return iter(self.G)

    def person(self, person_id: int) -> Person:
        return self.G.nodes[person_id]["person"]

    def neighbors(self, person_id: int) -> list[tuple[int, RelationType]]:
        """(neighbor id, relation type) pairs, one per edge leaving person_id."""
        return [
            (neighbor, data["relation_type"])
            for neighbor, edges in self.G.adj[person_id].items()
            for data in edges.values()
        ]

    def neighbor_ids(self, person_id: int) -> list[int]:
        return list(self.G.adj[person_id])

    def edges_between(self, u: int, v: int) -> list[dict]:
        if not self.G.has_edge(u, v):
            return []
        return list(self.G.get_edge_data(u, v).values())

    def parents(self, person_id: int) -> list[int]:
        return self._related(person_id, RelationType.CHILD, forward=False)

    def children(self, person_id: int) -> list[int]:
        return self._related(person_id, RelationType.CHILD, forward=True)

    def spouses(self, person_id: int) -> list[int]:
        return list(
            dict.fromkeys(
                v for v, rel_type in self.neighbors(person_id) if rel_type is RelationType.SPOUSE
            )
        )

    def number_of_relations(self) -> int:
        return sum(1 for *_, forward in self.G.edges(data="forward") if forward)

    def _related(self, person_id: int, rel_type: RelationType, forward: bool) -> list[int]:
        return [
            v
            for v, edges in self.G.adj[person_id].items()
            if any(d["relation_type"] is rel_type and d["forward"] is forward for d in edges.values())
        ]


def build_graph(people: Iterable[Person], relations: Iterable[Relation], version: int | None = None) -> FamilyGraph:
    """
    Build a FamilyGraph from flat lists of people and relations.

    Every person gets a node, even without relations. Relations whose endpoints
    are not both present are skipped and logged rather than raised.
    """
    G = nx.MultiDiGraph()

    # Add nodes (persons)
    for person in people:
        G.add_node(
            person.id,
            person=person,
            person_name=person.name,
            sex=person.gender,
            birth_date=person.birth_date,
        )

    # Add edges (relations), mirrored regardless of type
    skipped: list[Relation] = []
    for relation in relations:
        u, v = relation.from_id, relation.to_id
        if u not in G or v not in G:
            logger.warning(
                "Skipping relation %s -> %s (%s): endpoint missing",
                u,
                v,
                relation.relation_type.value,
            )
            skipped.append(relation)
            continue

        rel_type = relation.relation_type
        G.add_edge(u, v, key=(rel_type.value, True), relation_type=rel_type, forward=True)
        G.add_edge(v, u, key=(rel_type.value, False), relation_type=rel_type, forward=False)

    logger.debug(
        "Built graph with %d people and %d edges (%d skipped)",
        G.number_of_nodes(),
        G.number_of_edges(),
        len(skipped),
    )
    return FamilyGraph(G, version=version, skipped=skipped)


def build_graph_from_snapshot(snapshot: Snapshot) -> FamilyGraph:
    return build_graph(snapshot.people, snapshot.relations, version=snapshot.version)


def parent_child_digraph(graph: FamilyGraph) -> nx.DiGraph:
    """Directed parent -> child view, used for lineage checks."""
    D = nx.DiGraph()
    D.add_nodes_from(graph.G.nodes(data=True))
    D.add_edges_from(
        (u, v)
        for u, v, data in graph.G.edges(data=True)
        if data["relation_type"] is RelationType.CHILD and data["forward"]
    )
    return D
