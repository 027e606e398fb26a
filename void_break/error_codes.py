class ErrorCodes:
    VALIDATION_ERROR = "VB_VALIDATION_ERROR"
    NOT_FOUND = "VB_NOT_FOUND"
    GAME_LOGIC_ERROR = "VB_GAME_LOGIC_ERROR"
