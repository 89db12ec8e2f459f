"""
Exceptions raised by the virtual document layer.
"""


class VDocException(Exception):
    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """
        :param message: the message describing the failure
        :param cause: the underlying exception, if any
        """
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        s = super().__str__()
        if self.cause:
            if "\n" in s:
                s += "\n"
            else:
                s += " "
            s += f"(caused by {self.cause})"
        return s


class VDocResourceError(VDocException):
    """Raised when the backing resource of a virtual document cannot be materialized."""


class LanguageConfigError(VDocException):
    """Raised when an embedded language table is malformed."""
