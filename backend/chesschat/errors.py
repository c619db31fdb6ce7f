"""Client-facing error taxonomy for game actions.

Every error here is recoverable: the HTTP layer renders it as
``{"error": message, "code": code}`` with the class' status code.
"""


class GameError(Exception):
    status_code = 400
    code = 'game_error'
    default_message = 'Game error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class NotFoundError(GameError):
    status_code = 404
    code = 'not_found'
    default_message = 'Game not found'


class ForbiddenError(GameError):
    status_code = 403
    code = 'forbidden'
    default_message = 'Not authorized'


class InvalidStateError(GameError):
    status_code = 409
    code = 'invalid_state'
    default_message = 'Game is not active'


class InvalidMoveError(GameError):
    status_code = 400
    code = 'invalid_move'
    default_message = 'Invalid move'


class InvalidRequestError(GameError):
    status_code = 400
    code = 'invalid_request'
    default_message = 'Invalid request'
