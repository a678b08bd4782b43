"""Error types raised by the Combat Tracker engine."""


class TrackerError(ValueError):
    """Base class for every recoverable tracker error."""


class MalformedInputError(TrackerError):
    """A user-entered value could not be parsed."""


class InvalidDiceRequestError(TrackerError):
    """A roll was requested with a non-positive effective attribute."""


class InvalidTransitionError(TrackerError):
    """The combat state machine does not allow the requested transition."""


class LoadFailureError(TrackerError):
    """The seed roster could not be fetched."""


class SnapshotParseError(TrackerError):
    """The persisted roster snapshot is corrupt."""
