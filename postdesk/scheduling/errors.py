"""
Errors raised by the scheduling core.

The HTTP layer turns every SchedulingError into a 400 response.
"""


class SchedulingError(Exception):
    """Base class for scheduling failures"""

    error_code = "SCHEDULING_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidTime(SchedulingError):
    """A supplied or derived timestamp is not strictly in the future"""

    error_code = "INVALID_TIME"


class NotFound(SchedulingError):
    """No schedule with the given id"""

    error_code = "NOT_FOUND"

    def __init__(self, resource: str, id: str):
        self.resource = resource
        self.id = id
        super().__init__(f"{resource} '{id}' not found")


class InvalidState(SchedulingError):
    """Operation not allowed in the schedule's current status"""

    error_code = "INVALID_STATE"


class AlreadyCancelled(SchedulingError):
    """Schedule was cancelled before"""

    error_code = "ALREADY_CANCELLED"
