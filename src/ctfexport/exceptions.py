"""Custom exceptions for ctfexport."""


class CtfExportError(Exception):
    """Base exception for ctfexport operations."""


class ConfigError(CtfExportError):
    """Missing or invalid local configuration."""


class FetchError(CtfExportError):
    """Error while talking to the Contentful Management API."""


class NotFoundError(FetchError):
    """Requested resource does not exist."""


class AuthenticationError(FetchError):
    """Management token was rejected."""


class RateLimitError(FetchError):
    """Rate limited by Contentful."""


class WorkbookError(CtfExportError):
    """Error while writing the output workbook."""
