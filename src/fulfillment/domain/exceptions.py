"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass carries an ``exit_code`` the CLI uses as its process status.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    exit_code = 1


class ValidationError(DomainException):
    """Input was malformed or a business rule was violated.

    Raised before any unit of work opens; nothing is ever persisted.
    """

    exit_code = 2


class EntityNotFoundError(DomainException):
    """A requested entity does not exist (or belongs to another parent)."""

    exit_code = 3


class ConflictError(DomainException):
    """A uniqueness rule was violated (PO number per customer, part number)."""

    exit_code = 4


class OverShipmentError(DomainException):
    """A shipment asked for more than the line item has remaining."""

    exit_code = 5


class TransactionFailure(DomainException):
    """The store failed while a unit of work was in progress.

    The message is generic; full context goes to the log.
    """

    exit_code = 1
