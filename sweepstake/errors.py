"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    code = "app_error"

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    code = "validation_error"

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    code = "duplicate"

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    code = "not_found"

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class NothingToSubmit(ValidationError):
    """Raised when a submission is attempted with an empty draft."""

    code = "nothing_to_submit"

    def __init__(self, message="You have not made any predictions yet!"):
        """Initialize the error."""
        super().__init__(message)


class NoTeamSelected(ValidationError):
    """Raised when an operation needs a team and none has been chosen."""

    code = "no_team_selected"

    def __init__(
        self,
        message="No team selected. Please go back and select your team first.",
    ):
        """Initialize the error."""
        super().__init__(message)


class DeadlinePassed(AppError):
    """Raised when the competition no longer accepts submissions."""

    code = "deadline_passed"

    def __init__(self, competition_id, deadline=None):
        """Initialize the error."""
        message = f"Predictions for {competition_id} are closed."
        if deadline is not None:
            message = (
                f"Predictions for {competition_id} closed at {deadline.isoformat()}."
            )
        super().__init__(message, 403)
        self.competition_id = competition_id
        self.deadline = deadline


class AlreadySubmitted(DuplicateResourceError):
    """Raised when a team has already entered its predictions."""

    code = "already_submitted"

    def __init__(self, team_name=None):
        """Initialize the error."""
        if team_name:
            message = f"{team_name} has already entered their predictions!"
        else:
            message = "Your team has already made their predictions!"
        super().__init__(message)
        self.team_name = team_name


class PersistenceFailure(AppError):
    """Raised when the datastore rejects or loses a write."""

    code = "persistence_failure"

    def __init__(self, message="Error submitting predictions. Please try again."):
        """Initialize the error."""
        super().__init__(message, 503)
