"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class YotoExtractorError(Exception):
    """Base exception for all application-specific errors."""


class FetchError(YotoExtractorError):
    """
    Raised when a remote resource cannot be fetched: a network failure, a
    timeout, too many redirects, or a non-2xx response.
    """

    def __init__(self, url: str, reason: str, status: int | None = None):
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"Failed to fetch {url}: {reason}")


class ParseError(YotoExtractorError):
    """Raised when no JSON payload can be located in a fetched page."""


class SchemaError(YotoExtractorError):
    """Raised when a JSON payload does not contain a recognizable card."""


class UnknownContentTypeError(YotoExtractorError):
    """Raised when an audio response declares a content type with no known extension."""

    def __init__(self, content_type: str | None):
        self.content_type = content_type
        super().__init__(f"Unknown content type: {content_type}")


class FilesystemError(YotoExtractorError):
    """Raised when an output file or directory cannot be written, moved, or created."""


class ConfigurationError(YotoExtractorError):
    """Raised for issues related to configuration loading or validation."""
