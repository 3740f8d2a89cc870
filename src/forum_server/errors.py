class ForumError(Exception):
    """Base class for errors raised by the forum services."""


class NotFoundError(ForumError, LookupError):
    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class InvalidInputError(ForumError, ValueError):
    pass


class PersistenceError(ForumError):
    """The database rejected an operation; the transaction was rolled back."""
