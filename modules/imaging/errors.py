from __future__ import annotations


class ImagingError(Exception):
    """Base class for failures raised by the imaging adapters."""

    kind = "internal"


class ConfigurationError(ImagingError):
    """Required configuration (the provider credential) is missing.

    Not converted into an error envelope: hosts must handle it explicitly.
    """

    kind = "configuration_error"


class RequestValidationError(ImagingError):
    kind = "invalid_input"


class ProviderError(ImagingError):
    kind = "provider_error"


class StorageError(ImagingError):
    kind = "storage_error"


class DownloadError(ImagingError):
    kind = "download_failed"
