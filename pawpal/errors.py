"""Error taxonomy shared by the API server and the client data layer.

Every error carries the HTTP status it maps to, so the flask-restx
handlers registered in :func:`pawpal.register_error_handlers` can turn
them into JSON responses without knowing each class.
"""
from collections import namedtuple

FieldError = namedtuple('FieldError', ['field', 'reason'])


class PawPalError(Exception):
    code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'message': self.message}


class ValidationFailed(PawPalError):
    code = 400
    message = 'Invalid data'

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = list(errors)

    def to_dict(self):
        return {
            'message': self.message,
            'errors': [{'field': e.field, 'reason': e.reason} for e in self.errors]
        }


class AuthError(PawPalError):
    code = 401
    message = 'Authentication required'


class MissingToken(AuthError):
    message = 'Authentication required'


class InvalidToken(AuthError):
    message = 'Invalid token'


class InsufficientRole(AuthError):
    code = 403
    message = 'Insufficient privileges'


class InvalidCredentials(AuthError):
    message = 'Invalid credentials'


class Forbidden(PawPalError):
    code = 403
    message = 'Forbidden'


class NotFound(PawPalError):
    code = 404
    message = 'Not found'


class Conflict(PawPalError):
    code = 409
    message = 'Conflict'


class FetchError(PawPalError):
    """A data request failed in transport or on the server."""
    message = 'Request failed'

    def __init__(self, status_code=None, message=None):
        super().__init__(message)
        self.status_code = status_code

    def to_dict(self):
        return {'message': self.message, 'status_code': self.status_code}
