class InvalidLocationError(ValueError):
    """Raised when a location identifier is not a well-formed county FIPS code."""


class MalformedStormIdError(ValueError):
    """Raised when a storm_id has no ``-<year>`` suffix."""


class InvalidWindowError(ValueError):
    """Raised when a rain window day offset falls outside the supported range."""


class HazardSourceError(RuntimeError):
    """Raised when hazard tables cannot be loaded or lack required columns."""


class EmptyResultWarning(UserWarning):
    """No storm met the exposure rule for the requested locations and years."""
