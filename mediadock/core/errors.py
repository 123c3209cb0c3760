"""Domain-specific errors for mediadock."""


class MediadockError(Exception):
    """Base error for mediadock."""


class ConfigurationError(MediadockError):
    """Raised when the monitor is not configured well enough to run."""


class CatalogMissingError(ConfigurationError):
    """Raised when reconciliation is attempted without a device catalog."""


class CatalogValidationError(MediadockError):
    """Raised when a catalog file does not conform to schema or semantics."""


class CatalogLoadError(MediadockError):
    """Raised when reading catalog sources fails."""


class DeviceDiscoveryError(MediadockError):
    """Raised when enumerating attached devices fails."""
