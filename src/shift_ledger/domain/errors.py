"""Error taxonomy for the shift ledger."""

from shift_ledger.domain.reservations import ReservationStatus


class ShiftLedgerError(Exception):
    """Base class for errors raised by the shift ledger."""

    code = "Error"
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        """User-facing message."""
        return str(self)


class ValidationError(ShiftLedgerError):
    """A request rejected by the ledger rules."""

    code = "ValidationError"
    default_message = "The request is not valid in the current state."


class AlreadyOpenError(ValidationError):
    """A work session is already open for the day."""

    code = "AlreadyOpen"
    default_message = "A work session is already open for today."


class NoOpenSessionError(ValidationError):
    """There is no open work session to close."""

    code = "NoOpenSession"
    default_message = "There is no open work session for today."


class InvalidTransitionError(ValidationError):
    """A reservation status change outside the allowed transitions."""

    code = "InvalidTransition"

    def __init__(
        self, current: ReservationStatus, requested: ReservationStatus
    ) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move a reservation from {current.value} to {requested.value}."
        )


class NotAssignedError(ValidationError):
    """The acting worker is not the worker assigned to the reservation."""

    code = "NotAssigned"
    default_message = "This reservation is assigned to another worker."


class NotFoundError(ShiftLedgerError):
    """A referenced record does not exist."""

    code = "NotFound"
    default_message = "Not found."


class UnauthorizedError(ShiftLedgerError):
    """The request credential could not be resolved."""

    code = "Unauthorized"
    default_message = "Authentication required."


class ForbiddenError(ShiftLedgerError):
    """The principal is authenticated but may not use worker operations."""

    code = "Forbidden"
    default_message = "Worker access required."


class PersistenceError(ShiftLedgerError):
    """The underlying store failed or rejected a write."""

    code = "PersistenceError"
    default_message = "The service is temporarily unavailable. Please retry."


class TransitionConflictError(PersistenceError):
    """A concurrent writer changed the reservation first."""

    code = "TransitionConflict"
    default_message = "The reservation was changed by someone else. Please retry."
