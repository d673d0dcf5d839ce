"""
Domain errors shared by services and the HTTP layer.

Every error carries a user-safe message and the HTTP status it maps to.
The exception handler in ticket_sales.api.errors turns them into JSON responses.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ticket_sales.domain.availability import Unavailable


class DomainError(Exception):
    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class NotFoundError(DomainError):
    status_code = 404


class ConfigurationError(DomainError):
    """Ticket configuration failed edit-time validation."""

    status_code = 422

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class LookupFailure(DomainError):
    """The booking ledger or occurrence lookup could not be completed.

    Never reported to users as "sold out": callers should retry later.
    """

    status_code = 503

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("Ticket availability could not be determined, please try again")


class TicketUnavailableError(DomainError):
    """A reservation was refused because the ticket is not on sale or sold out."""

    status_code = 409

    def __init__(self, ticket_id: int, result: "Unavailable"):
        self.ticket_id = ticket_id
        self.result = result
        super().__init__(result.message)


class QuantityError(DomainError):
    status_code = 422


class ReservationStateError(DomainError):
    status_code = 400


class LockTimeoutError(DomainError):
    """A reservation lock could not be acquired in time."""

    status_code = 503

    def __init__(self, key: str):
        self.key = key
        super().__init__("Booking is busy for this ticket, please try again")
