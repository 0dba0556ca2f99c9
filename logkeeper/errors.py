"""
Exception hierarchy for Log Keeper.

Storage backends raise these so the retention engine can tell a missing
artifact apart from a failed write or a failed compression.
"""


class LogKeeperError(Exception):
    """Base exception for all Log Keeper errors."""

    pass


class NotFoundError(LogKeeperError):
    """Requested log or archive does not exist in the store."""

    pass


class ReadFailureError(LogKeeperError):
    """Store could not read an existing artifact."""

    pass


class WriteFailureError(LogKeeperError):
    """Store could not persist the given bytes."""

    pass


class CompressionError(LogKeeperError):
    """Archive creation failed."""

    pass


class ConfigurationError(LogKeeperError, ValueError):
    """Retention configuration is missing or malformed."""

    pass


class InvalidLogNameError(LogKeeperError, ValueError):
    """Log file name does not encode a YYYY-MM-DD date."""

    pass
