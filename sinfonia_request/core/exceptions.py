"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Each carries the process exit code the CLI reports for it; the codes
mirror curl's so scripts written against the old shell wrappers keep working.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR", exit_code: int = 1) -> None:
        self.message = message
        self.code = code
        self.exit_code = exit_code
        super().__init__(self.message)


class MissingArgumentError(ApplicationError):
    """Raised when a command that needs an argument is called without one."""

    def __init__(self, command: str, argument: str) -> None:
        self.command = command
        self.argument = argument
        super().__init__(
            f"Command '{command}' requires an argument: {argument}",
            code="VAL_MISSING_ARGUMENT",
            exit_code=2,
        )


class InvalidArgumentError(ApplicationError):
    """Raised when a command argument cannot be converted to the expected type."""

    def __init__(self, message: str = "Invalid argument") -> None:
        super().__init__(message, code="VAL_INVALID_ARGUMENT", exit_code=2)


class ThemeFileError(ApplicationError):
    """Raised when the theme file for an upload cannot be read."""

    def __init__(self, message: str = "Theme file could not be read") -> None:
        super().__init__(message, code="IO_THEME_FILE", exit_code=26)


class ServerUnreachableError(ApplicationError):
    """Raised when no connection to the sound server can be made."""

    def __init__(self, message: str = "Sound server is not reachable") -> None:
        super().__init__(message, code="NET_CONNECT_FAILED", exit_code=7)


class RequestTimeoutError(ApplicationError):
    """Raised when the sound server does not answer in time."""

    def __init__(self, message: str = "Request timed out") -> None:
        super().__init__(message, code="NET_TIMEOUT", exit_code=28)


class TransportError(ApplicationError):
    """Raised for any other failure while talking to the sound server."""

    def __init__(self, message: str = "Transport error") -> None:
        super().__init__(message, code="NET_TRANSPORT_ERROR", exit_code=1)
