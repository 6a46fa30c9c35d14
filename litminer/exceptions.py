class LitminerError(Exception):
    """Base class for litminer errors."""


class LoaderError(LitminerError):
    """Raised when a text source cannot be read or decoded."""


class ConfigError(LitminerError):
    """Raised for unreadable config files or unknown config keys."""


class ClassifierUnavailableError(LitminerError):
    """Raised when a classifier backend's library is not installed."""
