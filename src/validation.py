"""Integrity checks for family graph data."""

import networkx as nx

from dates import birth_year
from graph import FamilyGraph, parent_child_digraph

MIN_PARENT_AGE = 12


def validate_graph(graph: FamilyGraph) -> list[str]:
    """
    Validate the family graph for:
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent)
    - Parents younger than MIN_PARENT_AGE at a child's birth

    Returns a list of warning messages.
    """
    warnings: list[str] = []
    lineage = parent_child_digraph(graph)

    try:
        cycle = nx.find_cycle(lineage, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    # birth_date is ISO format (YYYY-MM-DD) and compares correctly as a string
    for parent, child in lineage.edges():
        parent_data = lineage.nodes[parent]
        child_data = lineage.nodes[child]

        parent_birth = parent_data.get("birth_date")
        child_birth = child_data.get("birth_date")
        if not (parent_birth and child_birth):
            continue

        if child_birth < parent_birth:
            warnings.append(
                f"Impossible: {child_data.get('person_name')} born before parent "
                f"{parent_data.get('person_name')}"
            )
        elif birth_year(child_birth) - birth_year(parent_birth) < MIN_PARENT_AGE:
            warnings.append(
                f"Suspicious: {parent_data.get('person_name')} was less than {MIN_PARENT_AGE} "
                f"years old when {child_data.get('person_name')} was born"
            )

    return warnings
