"""Typed failures raised by the jobs services.

Views turn any ``JobsError`` into ``{"error": message}`` with ``status_code``.
"""


class JobsError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(JobsError):
    status_code = 400
    default_message = "Invalid request"


class CapacityExceeded(JobsError):
    status_code = 400
    default_message = "All positions for this job are already filled"


class ApplicationClosed(JobsError):
    status_code = 400
    default_message = "This job is not accepting applications"


class AlreadyApplied(JobsError):
    status_code = 400
    default_message = "Already applied"


class Forbidden(JobsError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(JobsError):
    status_code = 404
    default_message = "Not found"


class StorageFailure(JobsError):
    status_code = 500
    default_message = "Failed to update application status"
