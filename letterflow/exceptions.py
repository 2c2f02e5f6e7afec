"""Custom Exception Hierarchy

Exception hierarchy for letterflow providing granular exception types for
configuration, rendering and export failures.
"""


class LetterflowError(Exception):
    """Base exception for all letterflow errors.

    This is the root of the exception hierarchy. Catching this exception
    will catch all custom exceptions raised by the library.
    """
    pass


# Validation Errors
class ValidationError(LetterflowError):
    """Raised when letter configuration fails validation."""
    pass


class InvalidConfigurationError(ValidationError):
    """Raised when configuration parameters are invalid."""
    pass


class MissingRequiredFieldError(ValidationError):
    """Raised when a required identifier is missing or empty."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"{field_name} is required")


class InvalidFormatError(ValidationError):
    """Raised when a page number format lacks its placeholder."""

    def __init__(self, field_name: str, placeholder: str):
        self.field_name = field_name
        self.placeholder = placeholder
        super().__init__(
            f"{field_name} must contain {placeholder} as placeholder for page number"
        )


class InvalidUnitError(ValidationError):
    """Raised when a length string cannot be parsed."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid length value: {value!r}")


# Rendering Errors
class RenderingError(LetterflowError):
    """Base class for PDF rendering errors."""
    pass


class FontError(RenderingError):
    """Raised when font setup or registration fails."""
    pass


class ImageLoadError(RenderingError):
    """Raised when an image cannot be acquired or decoded."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load image '{_shorten(source)}': {reason}")


# Export Errors
class ExportError(LetterflowError):
    """Raised when the finished document cannot be saved.

    The message is always user-facing; the underlying cause is chained.
    """
    pass


def _shorten(source: str, limit: int = 60) -> str:
    # Data URIs can be megabytes long
    return source if len(source) <= limit else source[:limit] + "..."
