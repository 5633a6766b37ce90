"""
Workflow errors.

Every rejection raised by the engine, the case store and the services is a
WorkflowError. The API maps `error_code` to an HTTP status; the CLI prints
`detail`.
"""

from typing import Any, Optional


class WorkflowError(Exception):
    """Base class for case workflow rejections."""

    error_code = "workflow_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidTransitionError(WorkflowError):
    """Requested status is not reachable from the current status."""

    error_code = "invalid_transition"

    def __init__(self, current: Any, requested: Any):
        self.current = _value(current)
        self.requested = _value(requested)
        super().__init__(
            f"Cannot move case from {self.current} to {self.requested}"
        )


class MissingDecisionError(WorkflowError):
    """A decision-point status was left without a valid outcome."""

    error_code = "missing_decision"

    def __init__(self, status: Any, field: str, value: Optional[Any] = None):
        self.status = _value(status)
        self.field = field
        self.value = value
        if value is None:
            message = f"{self.status} is a decision point: {field} is required (RESOLVED or UNRESOLVED)"
        else:
            message = f"{self.status} is a decision point: {field} must be RESOLVED or UNRESOLVED, got {value!r}"
        super().__init__(message)


class ValidationError(WorkflowError):
    """A field required by the target status is absent or malformed."""

    error_code = "validation_error"

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ConflictError(WorkflowError):
    """The case changed since the caller read it."""

    error_code = "conflict"

    def __init__(
        self,
        expected: Any,
        actual: Any,
        expected_version: Optional[int] = None,
        actual_version: Optional[int] = None,
    ):
        self.expected = _value(expected)
        self.actual = _value(actual)
        self.expected_version = expected_version
        self.actual_version = actual_version
        if self.expected == self.actual and expected_version is not None:
            message = (
                f"Case was updated since version {expected_version} "
                f"(now version {actual_version}); reload the case and retry"
            )
        else:
            message = f"Case status is {self.actual}, expected {self.expected}; reload the case and retry"
        super().__init__(message)


class NotFoundError(WorkflowError):
    """Unknown case (or hearing) id."""

    error_code = "not_found"

    def __init__(self, entity_id: Any, entity: str = "Blotter case"):
        self.entity_id = entity_id
        self.entity = entity
        super().__init__(f"{entity} not found: {entity_id}")


def _value(status: Any) -> Any:
    return getattr(status, "value", status)
