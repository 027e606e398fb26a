from void_break.error_codes import ErrorCodes


class AppException(Exception):
    """Base class for errors raised by the game core. status_code follows HTTP conventions for hosts that serve it."""

    def __init__(self, error_code, status_message, status_code, details=None):
        super().__init__(status_message)
        self.error_code = error_code
        self.status_message = status_message
        self.status_code = status_code
        self.details = details if details is not None else {}

    def to_dict(self):
        return {
            'error_code': self.error_code,
            'status_message': self.status_message,
            'details': self.details,
        }


class ValidationException(AppException):
    """Bad caller input: an off-ladder bet, an out-of-range bet index."""

    def __init__(self, status_message="Validation failed", details=None):
        super().__init__(ErrorCodes.VALIDATION_ERROR, status_message, 422, details)


class NotFoundException(AppException):
    """Unknown forced outcome or bonus-buy tier."""

    def __init__(self, status_message="Resource not found", details=None):
        super().__init__(ErrorCodes.NOT_FOUND, status_message, 404, details)


class GameLogicException(AppException):
    def __init__(self, status_message="Game logic error", details=None, status_code=400):
        super().__init__(ErrorCodes.GAME_LOGIC_ERROR, status_message, status_code, details)
