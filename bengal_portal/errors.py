# bengal_portal/errors.py

class PortalError(Exception):
    """Base class for every error raised by the service layer."""

    code = 'PORTAL_ERROR'
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class ValidationError(PortalError):
    """A required field is missing or a supplied value is not acceptable."""

    code = 'VALIDATION_ERROR'
    status_code = 400


class NotFoundError(PortalError):
    """The operation targets an id that is not in the collection."""

    code = 'NOT_FOUND'
    status_code = 404


class InvalidTransitionError(PortalError):
    """A status change that the record's transition table does not allow."""

    code = 'INVALID_TRANSITION'
    status_code = 409

    def __init__(self, current, requested, message=None):
        self.current = current
        self.requested = requested
        super().__init__(message or f"Cannot move from {current} to {requested}")


class CorruptCollectionError(PortalError):
    """A stored payload could not be parsed back into records."""

    code = 'CORRUPT_COLLECTION'

    def __init__(self, key, message=None):
        self.key = key
        super().__init__(message or f"Stored payload for '{key}' is unreadable")


class CorruptSessionError(CorruptCollectionError):
    code = 'CORRUPT_SESSION'


class AssistantUnavailableError(PortalError):
    """The assistant collaborator failed or returned nothing usable."""

    code = 'ASSISTANT_UNAVAILABLE'
    status_code = 503
