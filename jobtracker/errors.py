"""Exceptions raised by the tracker."""


class TrackerError(Exception):
    """Base class for tracker errors."""


class FormatError(TrackerError, ValueError):
    """CSV input is missing a usable header row."""


class PersistenceError(TrackerError):
    """The persistence slot could not be read or written."""
