"""Error taxonomy raised by the puzzle services.

Routes translate these into JSON error payloads; the services themselves
never know about HTTP beyond the status code they suggest.
"""


class PuzzleServiceError(Exception):
    status_code = 400
    code = 'BAD_REQUEST'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class InvalidRequest(PuzzleServiceError):
    status_code = 400
    code = 'BAD_REQUEST'


class NotFound(PuzzleServiceError):
    status_code = 404
    code = 'NOT_FOUND'


class PuzzleNotFound(NotFound):
    def __init__(self, message: str = 'Puzzle not found.'):
        super().__init__(message)


class SessionNotFound(NotFound):
    def __init__(self, message: str = 'Session not found.'):
        super().__init__(message)


class PuzzleForbidden(PuzzleServiceError):
    status_code = 403
    code = 'FORBIDDEN'

    def __init__(self, message: str = 'You cannot access this puzzle.'):
        super().__init__(message)
