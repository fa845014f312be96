"""Custom exceptions for echem_analytics."""


class EchemAnalyticsError(Exception):
    """Base exception class for echem_analytics."""


class ParseError(EchemAnalyticsError):
    """Base class for failures while turning a file into ParsedData."""


class CorruptDataError(ParseError):
    """Raised by a parser that claimed a file but could not parse it."""


class UnsupportedFormatError(ParseError):
    """Raised when no registered parser could handle a file.

    Either no parser claimed the file, or every claiming parser failed.
    """

    def __init__(self, filename: str, attempted: tuple[str, ...] = (), failures: dict | None = None):
        self.filename = filename
        self.attempted = tuple(attempted)
        self.failures = dict(failures or {})

        if not self.attempted:
            msg = f"No parser found for file type: {filename}"
        else:
            details = "; ".join(f"{name}: {err}" for name, err in self.failures.items())
            msg = f"All parsers failed for {filename} (tried {', '.join(self.attempted)})"
            if details:
                msg = f"{msg}: {details}"
        super().__init__(msg)


class InvalidInputError(EchemAnalyticsError, ValueError):
    """Raised for empty, mismatched or out-of-range inputs."""


class NumericDegenerateError(EchemAnalyticsError, ArithmeticError):
    """Raised when input data cannot produce a meaningful numeric result."""
