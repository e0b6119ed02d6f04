"""Custom exceptions shared by all layers."""


class ScoreTrackerError(Exception):
    """Top-level exception for this package."""


class InvalidRequestError(ScoreTrackerError):
    """Request data could not be interpreted."""


class RemoteSyncError(ScoreTrackerError):
    """A call to the remote store failed (network, timeout, database error)."""


class AttributionStateError(ScoreTrackerError):
    """Attribution step requested that is not valid in the current step."""


class AdjustmentPendingError(AttributionStateError):
    """A score adjustment is already waiting for attribution."""
