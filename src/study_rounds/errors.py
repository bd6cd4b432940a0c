"""Exceptions raised by the planning core and its stores."""


class StudyRoundsError(Exception):
    """Base class for all study-rounds errors."""


class ValidationError(StudyRoundsError, ValueError):
    """A value object or entity was constructed with invalid data."""


class NotFoundError(StudyRoundsError, LookupError):
    """An update or delete targeted a record that does not exist."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} with id {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class ConflictError(StudyRoundsError):
    """A stored record changed since it was read."""

    def __init__(self, kind: str, record_id: str, expected: int, actual: int):
        super().__init__(
            f"{kind} {record_id} is at version {actual}, expected {expected}"
        )
        self.kind = kind
        self.record_id = record_id
        self.expected = expected
        self.actual = actual
