from fastapi import status


class RailBookError(Exception):
    """Base for every error a request can end with.

    ``status_code`` is what the HTTP layer answers with and ``message`` is
    shown to the caller as-is, so keep it free of internals.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


#------------------------400------------------------
class ValidationError(RailBookError):
    message = "Invalid request"


class InvalidCredentials(ValidationError):
    message = "Invalid credentials"


class Conflict(RailBookError):
    message = "Resource already exists"


class DuplicateCredential(Conflict):
    message = "Username or mobile already exists"


class PolicyViolation(RailBookError):
    message = "Operation not allowed"


class SeatUnavailable(PolicyViolation):
    message = "No seats available"


class CancellationWindowClosed(PolicyViolation):
    message = "Cannot cancel ticket within 2 hours of departure"


#------------------------401------------------------
class Unauthorized(RailBookError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


#------------------------403------------------------
class Forbidden(RailBookError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Admin access required"


#------------------------404------------------------
class NotFound(RailBookError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class TrainNotFound(NotFound):
    message = "Train not found"


class TicketNotFound(NotFound):
    message = "Ticket not found"


class PaymentNotFound(NotFound):
    message = "Payment not found"


#------------------------500------------------------
class InternalError(RailBookError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"
