from __future__ import annotations
"""Domain error taxonomy.

Services raise these; the application error handler turns them into the
standard ``{"error": {...}}`` payload using ``status`` and ``kind``.
"""


class PrintDeskError(Exception):
    status = 500
    kind = 'error'
    title = 'Internal Server Error'

    def __init__(self, detail: str = ''):
        super().__init__(detail)
        self.detail = detail or self.title

    def to_payload(self):
        return {
            'error': {
                'status': self.status,
                'title': self.title,
                'detail': self.detail,
                'kind': self.kind,
            }
        }


class ValidationError(PrintDeskError):
    status = 400
    kind = 'validation'
    title = 'Bad Request'


class InvalidTransition(ValidationError):
    kind = 'invalid_transition'

    def __init__(self, current: str, target: str, field_name: str = 'status'):
        super().__init__(f"Invalid {field_name} transition {current} -> {target}")
        self.current = current
        self.target = target


class NotFound(PrintDeskError):
    status = 404
    kind = 'not_found'
    title = 'Not Found'


class AuthorizationError(PrintDeskError):
    status = 403
    kind = 'authorization'
    title = 'Forbidden'

    def __init__(self, detail: str = '', status: int = 403):
        self.status = status
        if status == 401:
            self.title = 'Unauthorized'
        super().__init__(detail)


class StorageError(PrintDeskError):
    kind = 'storage'


__all__ = ['PrintDeskError', 'ValidationError', 'InvalidTransition', 'NotFound', 'AuthorizationError', 'StorageError']
