"""
Error types raised by the junction read reconciliation library.

Only boundary and mode problems reach the caller. Malformed secondary
alignment tag entries are recovered inside the decoder and never escape it.
"""


class JunctionReadsError(Exception):
    """Base class for all library errors."""


class InvalidBoundary(JunctionReadsError, ValueError):
    """Insertion-centre coordinate outside (0, insert_length]."""

    def __init__(self, position, insert_length, message=None):
        self.position = position
        self.insert_length = insert_length
        if message is None:
            message = (
                f"Insertion centre {position!r} out of valid range "
                f"[1, {insert_length}]"
            )
        super().__init__(message)

    @classmethod
    def for_insert_length(cls, insert_length):
        """Insert length itself is unusable, so no centre can be valid."""
        return cls(
            None,
            insert_length,
            f"Insert length {insert_length!r} must be a positive integer",
        )


class InvalidMode(JunctionReadsError, ValueError):
    """Insertion-centre mode is not automatic, default or fixed."""

    VALID = ("auto", "default", "<integer position>")

    def __init__(self, value):
        self.value = value
        super().__init__(
            f"Invalid insertion-centre mode {value!r}; "
            f"expected one of {', '.join(self.VALID)}"
        )


class MalformedTagEntry(JunctionReadsError, ValueError):
    """A single SA/XA tag entry could not be parsed."""

    def __init__(self, entry, reason):
        self.entry = entry
        self.reason = reason
        super().__init__(f"Malformed tag entry {entry!r}: {reason}")
