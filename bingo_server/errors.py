"""Exception hierarchy for the bingo server.

None of these are fatal: the dispatcher turns validation and protocol
errors into a private ``error`` reply, swallows not-found lookups, and
fan-out drops transport errors per recipient.
"""


class BingoServerError(Exception):
    """Base exception for all bingo server errors."""
    pass


class ValidationError(BingoServerError):
    """Missing or invalid registration or withdrawal fields."""
    pass


class NotFoundError(BingoServerError):
    """A message referenced an unknown player or room."""

    def __init__(self, kind: str, identifier: str | None):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Unknown {kind}: {identifier}")


class ProtocolError(BingoServerError):
    """Malformed or unrecognized inbound frame."""
    pass


class TransportError(BingoServerError):
    """A single connection could not accept an outbound frame."""
    pass


class RangeExhaustedError(BingoServerError):
    """Every number of the variant's range has already been called."""
    pass
