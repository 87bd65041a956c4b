"""Custom exception classes for the application."""

from __future__ import annotations


class AppError(Exception):
    """Base application error class."""

    code = "app_error"

    def __init__(self, message: str, status_code: int = 400) -> None:
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Serialize the error for a JSON response."""
        return {"error": self.code, "message": self.message}


class ValidationError(AppError):
    """Raised when user input fails validation."""

    code = "validation_error"

    def __init__(
        self, message: str = "Validation failed.", field: str | None = None
    ) -> None:
        """Initialize the error."""
        super().__init__(message, 400)
        self.field = field

    def to_dict(self) -> dict[str, str]:
        """Include the offending field when known."""
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class NoDecision(ValidationError):
    """Raised when a set of scores does not produce a match winner."""

    code = "no_decision"

    def __init__(
        self, message: str = "The scores do not decide a winner.", field: str = "sets"
    ) -> None:
        """Initialize the error."""
        super().__init__(message, field)


class WinnerMismatch(AppError):
    """Raised when the declared winner differs from the computed one."""

    code = "winner_mismatch"

    def __init__(
        self, message: str = "The declared winner does not match the scores."
    ) -> None:
        """Initialize the error."""
        super().__init__(message, 409)


class UnknownPlayer(AppError):
    """Raised when a referenced player does not exist."""

    code = "unknown_player"

    def __init__(self, message: str = "Unknown player.") -> None:
        """Initialize the error."""
        super().__init__(message, 422)


class UnknownParticipant(AppError):
    """Raised when a match references a participant outside its group."""

    code = "unknown_participant"

    def __init__(self, message: str = "Unknown participant.") -> None:
        """Initialize the error."""
        super().__init__(message, 422)


class PhaseError(AppError):
    """Base class for unmet preconditions of a phase transition."""

    def __init__(self, message: str) -> None:
        """Initialize the error."""
        super().__init__(message, 409)


class IncompleteGroupStage(PhaseError):
    """Raised when a group still has matches without a winner."""

    code = "incomplete_group_stage"

    def __init__(self, message: str = "Not all group matches have a winner.") -> None:
        """Initialize the error."""
        super().__init__(message)


class RoundIncomplete(PhaseError):
    """Raised when a round still has matches without a winner."""

    code = "round_incomplete"

    def __init__(self, message: str = "Not all matches of the round have a winner.") -> None:
        """Initialize the error."""
        super().__init__(message)


class IncompleteResults(PhaseError):
    """Raised when a tournament cannot be finished yet."""

    code = "incomplete_results"

    def __init__(self, message: str = "Match results are missing.") -> None:
        """Initialize the error."""
        super().__init__(message)


class InsufficientQualifiers(PhaseError):
    """Raised when too few participants qualify for a bracket."""

    code = "insufficient_qualifiers"

    def __init__(self, message: str = "At least two participants must qualify.") -> None:
        """Initialize the error."""
        super().__init__(message)


class InvalidStateError(PhaseError):
    """Raised when an operation is not allowed in the tournament's current state."""

    code = "invalid_state"


class ConflictError(AppError):
    """Raised when a write is based on a stale version of a document."""

    code = "conflict"

    def __init__(self, message: str = "The document was modified concurrently.") -> None:
        """Initialize the error."""
        super().__init__(message, 409)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    code = "duplicate"

    def __init__(self, message: str = "Resource already exists.") -> None:
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    code = "not_found"

    def __init__(self, message: str = "Resource not found.") -> None:
        """Initialize the error."""
        super().__init__(message, 404)


class PermissionDeniedError(AppError):
    """Raised when the acting user may not perform an operation."""

    code = "forbidden"

    def __init__(self, message: str = "You are not authorized to do this.") -> None:
        """Initialize the error."""
        super().__init__(message, 403)
