"""Domain errors raised by the seating core"""


class SeatwiseError(Exception):
    """Base class for all domain errors"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SeatwiseError):
    """Referenced restaurant, sector, table, booking or entry does not exist"""
    status_code = 404


class CapacityConflictError(SeatwiseError):
    """No candidate exists, or the slot was taken before the commit landed"""
    status_code = 409


class ConflictError(SeatwiseError):
    """Entity already exists"""
    status_code = 409


class InvalidTransitionError(SeatwiseError):
    """Requested status change is not allowed from the current status"""
    status_code = 409


class CatalogValidationError(SeatwiseError):
    """Catalog input is inconsistent (ownership, capacities, time ranges)"""
    status_code = 400
