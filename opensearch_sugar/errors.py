# opensearch_sugar/errors.py

"""
Errors raised by the model lifecycle helpers.

Transport failures are not wrapped: they surface as opensearch-py's own
`opensearchpy.exceptions.OpenSearchException` subclasses.
"""


class SugarError(Exception):
    pass


class ModelError(SugarError):
    """Base class for ML model operations."""


class ModelNotFoundError(ModelError):
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Model '{identifier}' not found")


class InvalidIdentifierPattern(ModelError):
    """The identifier is not a usable nickname pattern (e.g. a broken regex)."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Invalid model identifier pattern '{identifier}': {reason}")


class ModelRegistrationError(ModelError):
    pass


class ModelRegistrationTimeoutError(ModelRegistrationError):
    pass


class TaskError(SugarError):
    def __init__(self, task_id: str, message: str):
        self.task_id = task_id
        super().__init__(message)


class TaskFailed(TaskError):
    def __init__(self, task_id: str, reason):
        self.reason = reason
        super().__init__(task_id, f"Task {task_id} failed: {reason}")


class TaskTimeout(TaskError):
    def __init__(self, task_id: str, elapsed: float):
        self.elapsed = elapsed
        super().__init__(task_id, f"Task {task_id} timed out after {elapsed:.2f}s")


class TaskCancelled(TaskError):
    def __init__(self, task_id: str):
        super().__init__(task_id, f"Task {task_id} wait was cancelled")
