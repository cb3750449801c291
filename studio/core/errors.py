"""
DOMAIN ERRORS

Raised by the scheduling core and the services, mapped to
{"error": message} responses by the handlers registered in main.py.
"""


class StudioError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


#Malformed or missing input
class ValidationError(StudioError):
    status_code = 400


#Booking status change not allowed by the transition table
class InvalidTransitionError(ValidationError):
    pass


class NotFoundError(StudioError):
    status_code = 404


#Overlapping time interval
class ConflictError(StudioError):
    status_code = 409

    def __init__(self, message: str, conflicts=None, status_code: int | None = None):
        super().__init__(message, status_code=status_code)
        self.conflicts = list(conflicts or [])


#Unexpected persistence failure, detail is only logged
class InternalError(StudioError):
    status_code = 500


#Email provider failure, recovered locally by the caller
class EmailDeliveryError(StudioError):
    pass
