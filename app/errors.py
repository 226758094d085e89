# app/errors.py
class TypingGameError(Exception):
    """Base class for fatal game errors."""


class TerminalUnavailable(TypingGameError):
    """Raised when raw mode cannot be entered or the size cannot be read."""


class InputReadFailure(TypingGameError):
    """Raised when the input stream fails or is closed mid-session."""
