class FilterValidationError(ValueError):
    """Raised when a search filter value fails its constraint."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class TransportError(RuntimeError):
    """Raised when a collaborator call fails (network errors, bad status, unreadable payload)."""
    pass


class ConflictError(RuntimeError):
    """Raised when a hall slot is already booked by someone else."""
    pass


class ActionNotAllowedError(RuntimeError):
    """Raised when a row action is not legal for the booking's status."""
    pass


class WorkflowStateError(RuntimeError):
    """Raised when a workflow step is invoked from the wrong state."""
    pass


class BookingNotFoundError(LookupError):
    """Raised when a booking number is not among the visible rows."""
    pass
