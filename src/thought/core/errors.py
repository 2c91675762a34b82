"""Error taxonomy shared by the store, the backup engine and the front ends."""


class ThoughtError(Exception):
    """Base class for thought-cli errors."""


class NotFoundError(ThoughtError):
    """A section or backup file does not exist."""


class IOFailureError(ThoughtError):
    """A read, write or permission failure on the filesystem."""


class InvalidArgumentError(ThoughtError):
    """User input rejected before any mutation took place."""


class CorruptDataError(ThoughtError):
    """Metadata or backup content could not be parsed."""
