"""Error taxonomy shared by the board service and the HTTP layer."""


class BoardError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'message': self.message}


class InvalidFormat(BoardError):
    """Malformed task or column payload; never persisted."""
    status_code = 400


class BadRequest(BoardError):
    """Malformed bulk payload or a request the board cannot satisfy."""
    status_code = 400


class NotFound(BoardError):
    status_code = 404


class Internal(BoardError):
    """I/O or serialization failure in the persistence layer."""
    status_code = 500

    def __init__(self, message, error=None):
        super().__init__(message)
        self.error = error

    def to_dict(self):
        body = {'message': self.message}
        if self.error is not None:
            body['error'] = str(self.error)
        return body
