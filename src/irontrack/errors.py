"""Exception hierarchy for IronTrack."""


class IronTrackError(Exception):
    """Base class for all errors raised by IronTrack."""


class ConfigurationError(IronTrackError):
    """Raised when the backend settings are missing or inconsistent."""


class ValidationError(IronTrackError, ValueError):
    """Raised when a required field is missing or invalid before submission."""


class NetworkError(IronTrackError):
    """Raised when a call to the data service fails.

    Covers fetch, insert, update, delete, upload and auth calls. Callers
    report it once; nothing in IronTrack retries automatically.
    """


class AuthenticationError(NetworkError):
    """Raised when the data service rejects the supplied credentials."""


class AuthRequired(IronTrackError):
    """Raised when an operation needs a signed-in user and there is none."""


class DataError(IronTrackError):
    """Raised when a record from the data service cannot be parsed."""
