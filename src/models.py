"""Data classes for family tree entities."""

from dataclasses import dataclass
from enum import Enum
import re

from errors import InvalidRelation, UnknownPerson

GENDERS = ("M", "F")

ID_PATTERN = re.compile(r"-?[0-9]+", flags=re.ASCII)


class RelationType(str, Enum):
    SPOUSE = "spouse"
    CHILD = "child"  # from = parent, to = child


class Algorithm(str, Enum):
    DFS = "dfs"
    BFS = "bfs"
    DIJKSTRA = "dijkstra"


@dataclass(frozen=True)
class Person:
    id: int
    name: str
    gender: str | None = None  # "M", "F" or unset
    birth_date_string: str | None = None
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    photo: str | None = None
    details: str | None = None


@dataclass(frozen=True)
class Relation:
    from_id: int
    to_id: int
    relation_type: RelationType

    def involves(self, person_id: int) -> bool:
        return person_id in (self.from_id, self.to_id)


@dataclass(frozen=True)
class Snapshot:
    """Consistent dump of the entity store at a given version."""

    version: int
    people: tuple[Person, ...]
    relations: tuple[Relation, ...]
    next_id: int = 1  # ids below this have been handed out


@dataclass(frozen=True)
class PathResult:
    algorithm: Algorithm
    start_id: int
    goal_id: int
    path: tuple[int, ...] = ()
    version: int | None = None  # version of the graph the path was found on

    @property
    def found(self) -> bool:
        return bool(self.path)

    @property
    def hops(self) -> int | None:
        """Number of relations along the path, or None when there is no path."""
        return len(self.path) - 1 if self.path else None


@dataclass(frozen=True)
class PathStep:
    person_id: int
    name: str
    relation: str | None  # how this person relates to the previous step


def normalize_id(value) -> int:
    """
    Normalize a person id to an int.

    Accepts ints and their plain decimal string forms ("3", " 3 ") as well as
    integral floats. Strings like "1_0", "+3" or non-ASCII digits are rejected.
    Raises UnknownPerson for anything that cannot denote a person id.
    """
    if isinstance(value, bool):
        raise UnknownPerson(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and ID_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    raise UnknownPerson(value)


def normalize_relation_type(value) -> RelationType:
    if isinstance(value, RelationType):
        return value
    try:
        return RelationType(str(value).strip().lower())
    except ValueError:
        raise InvalidRelation(f"Unknown relation type: {value!r}") from None
