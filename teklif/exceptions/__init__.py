"""Custom exceptions for the proposal archive application."""

class ArchiveError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class BusinessLogicError(ArchiveError):
    """Exception raised for business rule violations (bad status, unconfirmed delete)."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class NotFoundError(ArchiveError):
    """Exception raised when a proposal is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)
