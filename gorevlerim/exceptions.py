class OwnerResolutionError(Exception):
    """Raised when the default user has no personal group."""


class TaskNotFoundError(Exception):
    """Raised when a task ordinal is beyond the end of its partition."""

    def __init__(self, number: int):
        self.number = number
        super().__init__(f"Task {number} not found")


class StoreError(Exception):
    """Raised when the backing store rejects or fails a request."""


class InvalidRequestError(Exception):
    """Raised when a required request field is missing."""


TODO_ERRORS = (OwnerResolutionError, TaskNotFoundError, StoreError, InvalidRequestError)
