"""Exception hierarchy for rpmsync.

Fatal errors are raised as ``RpmsyncError`` subclasses and reported by the
CLI with exit code 1. Safety refusals are not errors and never raise.
"""


class RpmsyncError(Exception):
    """Base exception for all fatal rpmsync errors."""


class ConfigurationError(RpmsyncError):
    """Raised when required input is missing, malformed or unresolvable."""


class ExecutionError(RpmsyncError):
    """Raised when an external tool or filesystem operation fails.

    Attributes:
        output: Captured output of the failed command, if any.
    """

    def __init__(self, message: str, output: str = "") -> None:
        self.output = output.strip()
        if self.output:
            message = f"{message}\n{self.output}"
        super().__init__(message)
