"""Typed failures raised by the entity store and the query facade."""


class KinshipError(Exception):
    """Base class for every recoverable engine failure."""


class NotFound(KinshipError, LookupError):
    """A referenced person or relation does not exist."""

    def __init__(self, message: str, person_id: int | None = None):
        super().__init__(message)
        self.person_id = person_id


class InvalidPerson(KinshipError, ValueError):
    """Person data is malformed (blank name, unknown gender, unknown field)."""


class InvalidRelation(KinshipError, ValueError):
    """A relation was rejected by the store."""

    def __init__(self, message: str, from_id: int | None = None, to_id: int | None = None):
        super().__init__(message)
        self.from_id = from_id
        self.to_id = to_id


class InvalidEndpoint(InvalidRelation):
    pass


class DuplicateRelation(InvalidRelation):
    pass


class SelfRelation(InvalidRelation):
    pass


class TooManyParents(InvalidRelation):
    pass


class InverseRelation(InvalidRelation):
    """The child is already recorded as a parent of the would-be parent."""


class InvalidAlgorithm(KinshipError, ValueError):
    def __init__(self, algorithm):
        super().__init__(f"Unknown search algorithm: {algorithm!r}")
        self.algorithm = algorithm


class UnknownPerson(KinshipError, LookupError):
    """A query references something that is not a person in the graph."""

    def __init__(self, person_id):
        super().__init__(f"Unknown person: {person_id!r}")
        self.person_id = person_id
