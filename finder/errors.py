"""
Exception hierarchy for freelancer-finder.

Transport failures against Streamtime are not exceptions here: the client
returns None and callers degrade to partial results. These types cover the
failures that do need to stop a single operation.
"""


class FinderError(Exception):
    """Base class for all finder errors."""


class ConfigError(FinderError):
    """Sources configuration is present but invalid."""


class SheetsError(FinderError):
    """A Google Sheets read or write failed."""

    def __init__(self, message: str, range_: str | None = None):
        super().__init__(message)
        self.range = range_


class SchemaMismatchError(FinderError):
    """A required column is missing from a spreadsheet tab."""

    def __init__(self, column: str, headers: list[str]):
        super().__init__(f"No '{column}' column found (headers: {', '.join(headers) or 'none'})")
        self.column = column
        self.headers = headers
