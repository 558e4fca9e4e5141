class BoardCoreException(Exception):
    """Base exception for board core."""
    pass


class DataSourceError(BoardCoreException):
    """Raised when the trivia data source fails or returns a malformed payload."""
    pass


class InsufficientDataError(BoardCoreException):
    """Raised when fewer categories or clues are available than the board needs."""
    pass


class OutOfRangeError(BoardCoreException):
    """Raised when a cell coordinate does not address a clue on the board."""
    pass


class GameStateError(BoardCoreException):
    """Raised when there's an error with game state."""
    pass


class StaleBoardError(GameStateError):
    """Raised when a click targets a board that has since been replaced."""
    pass


class BuildCancelledError(BoardCoreException):
    """Raised when a board build was superseded by a newer start/restart."""
    pass


class ConfigurationError(BoardCoreException):
    """Raised when there's a configuration error."""
    pass
