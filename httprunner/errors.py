"""httprunner errors."""


class HttpRunnerError(Exception):
    """Base class for errors surfaced by httprunner."""


class ParseError(HttpRunnerError):
    """A request file could not be parsed. Fatal for the whole file."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class EnvironmentFileError(HttpRunnerError):
    """http-client.env.json exists but is not a valid environment document."""


class UnresolvedReferenceError(HttpRunnerError):
    """A request-variable reference names an unknown or not-yet-executed request."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Unresolved request variable: {reference}")


class TransportError(HttpRunnerError):
    """No response was obtained (connection failure, timeout, ...)."""

    def __init__(self, message: str, duration_ms: int = 0):
        self.duration_ms = duration_ms
        super().__init__(message)
