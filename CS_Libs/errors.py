"""
Exception types for Color Sorter.

Each error class also derives from the builtin exception a caller would
otherwise expect (ValueError for bad input, OSError for I/O failures), so
existing ``except ValueError`` / ``except OSError`` handlers keep working.
"""


class ColorSorterError(Exception):
    """Base class for all Color Sorter errors."""


class ValidationError(ColorSorterError, ValueError):
    """Input rejected at the ingestion boundary."""


class UnsupportedFormatError(ValidationError):
    """The uploaded file is not one of the accepted encodings."""


class CapacityExceededError(ValidationError):
    """Accepting the upload would exceed the record cap."""


class ImageDecodeError(ColorSorterError, OSError):
    """Image data could not be decoded."""


class ExportDecodeError(ImageDecodeError):
    """A cell's image failed to decode while composing an export."""


class PersistenceError(ColorSorterError, OSError):
    """The project store could not be written."""


class PreconditionError(ColorSorterError, RuntimeError):
    """An operation was requested before its inputs were ready."""
