"""
Error taxonomy shared by the job store, the HTTP layer and the board.

Server side the store raises these and the API turns them into status
codes. Client side the HTTP client maps status codes back to them, so the
board controller only ever catches JobTrackerError.
"""


class JobTrackerError(Exception):
    """Base class for all job tracker failures."""

    status_code = 500


class NetworkError(JobTrackerError):
    """The request never reached the server, or no usable answer came back."""

    status_code = 503


class NotFound(JobTrackerError):
    """No job with the given id exists."""

    status_code = 404


class ValidationError(JobTrackerError):
    """A candidate or patch failed validation."""

    status_code = 400

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class StoreUnavailable(JobTrackerError):
    """The database could not be reached or queried."""

    status_code = 500
