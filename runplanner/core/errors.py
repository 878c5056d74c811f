"""Domain-specific errors for plan and workout operations.

Every error raised by services and stores derives from RunPlannerError,
so callers (CLI, HTTP layer) can map each kind to a response without
inspecting messages.
"""


class RunPlannerError(Exception):
    """Base exception for all runplanner errors."""

    pass


class NotFoundError(RunPlannerError):
    """Raised when a plan, workout or user does not exist."""

    pass


class InvalidInputError(RunPlannerError):
    """Raised when caller-supplied data violates a stated constraint."""

    pass


class BatchValidationError(InvalidInputError):
    """Raised when one item of a workout batch is invalid.

    Attributes:
        index: Zero-based position of the failing item
        reason: Human-readable description of the violation
    """

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"workout[{index}]: {reason}")


class ConflictError(RunPlannerError):
    """Raised when a unique key is already taken (e.g., email)."""

    pass


class GenerationNotConfiguredError(RunPlannerError):
    """Raised when plan generation is requested without a completion client."""

    pass


class GenerationFailedError(RunPlannerError):
    """Raised when the completion call fails or returns unusable output."""

    pass


class PersistenceError(RunPlannerError):
    """Raised when the backing store fails unexpectedly."""

    pass
