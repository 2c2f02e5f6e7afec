"""Utilities Module

Validation helpers for letter configuration and export file names.
"""
from typing import Iterable, Optional

from .config import PAGE_NUMBER_PLACEHOLDER, PDF_EXTENSION
from .exceptions import (
    InvalidConfigurationError,
    InvalidFormatError,
    MissingRequiredFieldError,
)


def validate_required(value: Optional[str], field_name: str) -> None:
    """
    Validate that a required identifier is present and non-blank.

    Args:
        value: Value supplied by the caller
        field_name: Field name used in the error message

    Raises:
        MissingRequiredFieldError: If value is None, empty or whitespace
    """
    if not value or not str(value).strip():
        raise MissingRequiredFieldError(field_name)


def validate_file_name(file_name: Optional[str]) -> None:
    """Validate the export file name is given."""
    validate_required(file_name, "fileName")


def validate_dept_signature(dept_signature: Optional[str]) -> None:
    """Validate the department signature image reference is given."""
    validate_required(dept_signature, "deptSignature")


def validate_page_number_format(page_format: str, field_name: str = "pageNumberFormat") -> None:
    """
    Validate a page number format contains its placeholder.

    Args:
        page_format: Format string such as "-#-" or "Page #"
        field_name: Field name used in the error message

    Raises:
        InvalidFormatError: If the placeholder character is missing
    """
    if not page_format or PAGE_NUMBER_PLACEHOLDER not in page_format:
        raise InvalidFormatError(field_name, PAGE_NUMBER_PLACEHOLDER)


def validate_choice(value: str, allowed: Iterable[str], field_name: str) -> None:
    """
    Validate an option is one of the allowed values.

    Raises:
        InvalidConfigurationError: If value is not allowed
    """
    allowed = tuple(allowed)
    if value not in allowed:
        raise InvalidConfigurationError(
            f"{field_name} must be one of {', '.join(allowed)}, got {value!r}"
        )


def ensure_pdf_extension(file_name: str) -> str:
    """
    Append the .pdf extension unless already present.

    Examples:
        >>> ensure_pdf_extension("letter")
        'letter.pdf'
        >>> ensure_pdf_extension("letter.pdf")
        'letter.pdf'
    """
    if file_name.lower().endswith(PDF_EXTENSION):
        return file_name
    return file_name + PDF_EXTENSION
