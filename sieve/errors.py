"""Exception hierarchy for the sieve index."""


class SieveError(Exception):
    """Base exception for sieve errors."""

    pass


class InvalidInputError(SieveError, ValueError):
    """Raised when vectors, ids or queries are malformed."""

    pass


class DimensionMismatchError(InvalidInputError):
    """Raised when a vector's dimensionality differs from the index's."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"Expected vector of dimension {expected}; received {received}")
        self.expected = expected
        self.received = received


class InvalidConfigurationError(SieveError, ValueError):
    """Raised for build or search parameters the index cannot honour."""

    pass
