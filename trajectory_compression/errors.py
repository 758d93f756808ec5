"""
Error types raised by the trajectory compression package.

Numeric conversion failures in the coordinate model use the builtin ValueError.
"""


class InvalidArgument(Exception):
    """
    Precondition violation on a call into the simplifier or encoder
    (length mismatch, negative tolerance, decreasing timestamps).

    This signals a bug at the call site and is not meant to be caught and retried.
    """


class PltParseError(ValueError):
    """Raised when a GeoLife .plt file cannot be parsed."""

    INVALID_FIELD_COUNT = "invalid_field_count"
    DATE_PARSE = "date_parse"
    LATITUDE_PARSE = "latitude_parse"
    LONGITUDE_PARSE = "longitude_parse"
    INVALID_TIMESTAMP = "invalid_timestamp"

    def __init__(self, kind: str, message: str, line_number: int = None):
        self.kind = kind
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class ConfigError(ValueError):
    """Raised for an unreadable or invalid YAML configuration."""
