"""Entity store: the single source of truth for people and relations."""

import dataclasses
import logging
import threading
from collections.abc import Iterable

from dates import parse_date_string
from errors import (
    DuplicateRelation,
    InvalidEndpoint,
    InvalidPerson,
    InvalidRelation,
    InverseRelation,
    NotFound,
    SelfRelation,
    TooManyParents,
)
from models import (
    GENDERS,
    Person,
    Relation,
    RelationType,
    Snapshot,
    normalize_id,
    normalize_relation_type,
)

logger = logging.getLogger(__name__)

MAX_PARENTS = 2

# Fields update_person may change; id is identity and never changes.
EDITABLE_FIELDS = ("name", "gender", "birth_date_string", "photo", "details")


class EntityStore:
    """
    Holds the canonical people and relations and enforces their invariants.

    Every mutation is validated before anything is written, so a rejected call
    leaves the store untouched. Mutations and snapshot reads share one
    re-entrant lock; `version` increases with every successful mutation.

    Usage:
        store = EntityStore()
        a = store.add_person("Alice", gender="F")
        b = store.add_person("Bob", gender="M")
        store.add_relation(a.id, b.id, "spouse")
    """

    def __init__(self):
        self._people: dict[int, Person] = {}
        self._relations: list[Relation] = []
        self._next_id = 1
        self._version = 0
        self._lock = threading.RLock()

    @classmethod
    def from_records(
        cls,
        people: Iterable[Person],
        relations: Iterable[Relation],
        next_id: int = 1,
    ) -> "EntityStore":
        """
        Rebuild a store from persisted records, keeping their ids.

        Relations go through the same validation as add_relation, so a corrupt
        dump fails loudly instead of producing an inconsistent store.
        """
        store = cls()
        store._next_id = next_id
        with store._lock:
            for person in people:
                store._insert_person(person)
            for relation in relations:
                store.add_relation(relation.from_id, relation.to_id, relation.relation_type)
        return store

    @property
    def version(self) -> int:
        return self._version

    # ─────────────────────────────────────────
    # People
    # ─────────────────────────────────────────

    def add_person(
        self,
        name: str,
        gender: str | None = None,
        birth_date_string: str | None = None,
        photo: str | None = None,
        details: str | None = None,
    ) -> Person:
        """Store a new person under a fresh id and return it."""
        with self._lock:
            person = Person(
                id=self._next_id,
                name=_check_name(name),
                gender=_check_gender(gender),
                birth_date_string=birth_date_string,
                birth_date=parse_date_string(birth_date_string),
                photo=photo,
                details=details,
            )
            self._insert_person(person)
            logger.info("Added person %d (%s)", person.id, person.name)
            return person

    def update_person(self, person_id, **changes) -> Person:
        """Apply the supplied fields to a person; others are left as they are."""
        with self._lock:
            current = self.get_person(person_id)

            unknown = set(changes) - set(EDITABLE_FIELDS)
            if unknown:
                raise InvalidPerson(f"Cannot update field(s): {', '.join(sorted(unknown))}")
            if "name" in changes:
                changes["name"] = _check_name(changes["name"])
            if "gender" in changes:
                changes["gender"] = _check_gender(changes["gender"])
            if "birth_date_string" in changes:
                changes["birth_date"] = parse_date_string(changes["birth_date_string"])

            updated = dataclasses.replace(current, **changes)
            self._people[updated.id] = updated
            self._version += 1
            logger.info("Updated person %d: %s", updated.id, ", ".join(sorted(changes)))
            return updated

    def remove_person(self, person_id) -> None:
        """Remove a person together with every relation referencing them."""
        with self._lock:
            person = self.get_person(person_id)
            kept = [r for r in self._relations if not r.involves(person.id)]
            dropped = len(self._relations) - len(kept)

            del self._people[person.id]
            self._relations = kept
            self._version += 1
            logger.info("Removed person %d and %d relation(s)", person.id, dropped)

    def get_person(self, person_id) -> Person:
        pid = _to_id(person_id)
        with self._lock:
            try:
                return self._people[pid]
            except KeyError:
                raise NotFound(f"Person {person_id!r} not found", person_id=pid) from None

    def __contains__(self, person_id) -> bool:
        try:
            return normalize_id(person_id) in self._people
        except LookupError:
            return False

    def people(self) -> list[Person]:
        with self._lock:
            return list(self._people.values())

    # ─────────────────────────────────────────
    # Relations
    # ─────────────────────────────────────────

    def add_relation(self, from_id, to_id, relation_type) -> Relation:
        """
        Validate and store a relation.

        Raises:
            InvalidRelation: unknown relation type
            InvalidEndpoint: either endpoint is not a stored person
            SelfRelation: from_id == to_id
            DuplicateRelation: the same relation (either orientation for spouse) exists
            InverseRelation: child relation whose inverse already exists
            TooManyParents: the child already has two parents
        """
        rel_type = normalize_relation_type(relation_type)
        with self._lock:
            src, dst = self._endpoint(from_id, to_id), self._endpoint(to_id, from_id)
            relation = Relation(src, dst, rel_type)

            if src == dst:
                raise SelfRelation(f"Person {src} cannot be related to themselves", src, dst)
            if self._find_relation(src, dst, rel_type) is not None:
                raise DuplicateRelation(
                    f"Relation {src} -> {dst} ({rel_type.value}) already exists", src, dst
                )
            if rel_type is RelationType.CHILD:
                if Relation(dst, src, rel_type) in self._relations:
                    raise InverseRelation(
                        f"Person {dst} is already a parent of {src}", src, dst
                    )
                if len(self._parent_ids(dst)) >= MAX_PARENTS:
                    raise TooManyParents(
                        f"Person {dst} already has {MAX_PARENTS} parents", src, dst
                    )

            self._relations.append(relation)
            self._version += 1
            logger.info("Added relation %d -> %d (%s)", src, dst, rel_type.value)
            return relation

    def remove_relation(self, from_id, to_id, relation_type) -> None:
        rel_type = normalize_relation_type(relation_type)
        with self._lock:
            relation = self._find_relation(_to_id(from_id), _to_id(to_id), rel_type)
            if relation is None:
                raise NotFound(f"No {rel_type.value} relation between {from_id!r} and {to_id!r}")

            self._relations.remove(relation)
            self._version += 1
            logger.info(
                "Removed relation %d -> %d (%s)",
                relation.from_id,
                relation.to_id,
                rel_type.value,
            )

    def relations(self) -> list[Relation]:
        with self._lock:
            return list(self._relations)

    def parents_of(self, person_id) -> list[Person]:
        with self._lock:
            person = self.get_person(person_id)
            return [self._people[pid] for pid in self._parent_ids(person.id)]

    # ─────────────────────────────────────────
    # Compound operations
    # ─────────────────────────────────────────

    def add_child(self, parent_ids: Iterable, **person_data) -> Person:
        """
        Create a person and link them to one or two parents in a single step.

        If any parent link is rejected, the new person is not kept.
        """
        parents = [_to_id(pid) for pid in parent_ids]
        if not parents:
            raise InvalidPerson("A child needs at least one parent")
        if len(set(parents)) > MAX_PARENTS:
            raise TooManyParents(f"A child can have at most {MAX_PARENTS} parents")

        with self._lock:
            for pid in parents:
                self.get_person(pid)
            return self._add_linked(
                person_data, [(pid, RelationType.CHILD) for pid in dict.fromkeys(parents)]
            )

    def add_spouse(self, person_id, **person_data) -> Person:
        """Create a person married to an existing one."""
        with self._lock:
            existing = self.get_person(person_id)
            return self._add_linked(person_data, [(existing.id, RelationType.SPOUSE)])

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(
                version=self._version,
                people=tuple(self._people.values()),
                relations=tuple(self._relations),
                next_id=self._next_id,
            )

    # ─────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────

    def _insert_person(self, person: Person) -> None:
        if person.id in self._people:
            raise InvalidPerson(f"Duplicate person id {person.id}")
        self._people[person.id] = person
        self._next_id = max(self._next_id, person.id + 1)
        self._version += 1

    def _add_linked(self, person_data: dict, links: list[tuple]) -> Person:
        """Add a person plus (existing id, type) relations pointing at them."""
        # Rolled back wholesale if any link is rejected
        saved = (dict(self._people), list(self._relations), self._next_id, self._version)
        person = self.add_person(**person_data)
        try:
            for src, rel_type in links:
                self.add_relation(src, person.id, rel_type)
        except InvalidRelation as exc:
            self._people, self._relations, self._next_id, self._version = saved
            logger.info("Rolled back person %d (%s): %s", person.id, person.name, exc)
            raise
        return person

    def _endpoint(self, person_id, other_id) -> int:
        try:
            pid = normalize_id(person_id)
        except LookupError:
            raise InvalidEndpoint(
                f"Relation endpoint {person_id!r} is not a person id"
            ) from None
        if pid not in self._people:
            raise InvalidEndpoint(f"Relation endpoint {pid} does not exist", pid, other_id)
        return pid

    def _find_relation(self, from_id: int, to_id: int, rel_type: RelationType) -> Relation | None:
        candidates = [Relation(from_id, to_id, rel_type)]
        if rel_type is RelationType.SPOUSE:
            candidates.append(Relation(to_id, from_id, rel_type))
        for relation in self._relations:
            if relation in candidates:
                return relation
        return None

    def _parent_ids(self, child_id: int) -> list[int]:
        return [
            r.from_id
            for r in self._relations
            if r.relation_type is RelationType.CHILD and r.to_id == child_id
        ]


def _to_id(person_id) -> int:
    try:
        return normalize_id(person_id)
    except LookupError:
        raise NotFound(f"Person {person_id!r} not found") from None


def _check_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidPerson("A person needs a non-empty name")
    return name.strip()


def _check_gender(gender) -> str | None:
    if gender is None:
        return None
    normalized = str(gender).strip().upper()
    if normalized not in GENDERS:
        raise InvalidPerson(f"Gender must be one of {GENDERS}, got {gender!r}")
    return normalized
