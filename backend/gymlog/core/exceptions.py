"""Domain exceptions raised by the gymlog services."""


class GymlogError(Exception):
    """Base exception for gymlog errors."""

    pass


class NotFoundError(GymlogError):
    """Entity lookup by id found nothing."""

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class DuplicateNameError(GymlogError):
    """An exercise with the same (case-sensitive) name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Exercise named '{name}' already exists")


class ExerciseInUseError(GymlogError):
    """Exercise deletion refused because workout links still reference it."""

    def __init__(self, name: str, reference_count: int):
        self.name = name
        self.reference_count = reference_count
        super().__init__(
            f"Exercise '{name}' is referenced by {reference_count} workout exercise(s)"
        )


class CategoryLockedError(GymlogError):
    """Template category cannot change once exercises are attached."""

    pass


class InvalidReorderError(GymlogError, IndexError):
    """Reorder indices fall outside the collection being reordered."""

    pass


class OwnershipError(GymlogError):
    """A workout exercise link does not have exactly one owner."""

    pass


class PersistenceError(GymlogError):
    """Store failure while flushing or committing; the transaction was rolled back."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        message = f"Persistence failure during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
