"""Error taxonomy for the analysis pipeline."""


class ImageInsightError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(ImageInsightError):
    """Caller-supplied input was rejected before any network call."""


class ReadError(ImageInsightError):
    """The bytes of a source file could not be obtained."""


class ConfigError(ImageInsightError, ValueError):
    """Required configuration is missing or invalid. Fatal at startup."""


class RemoteError(ImageInsightError):
    """The remote inference call failed."""
