"""Converter error types."""


class ConverterError(Exception):
    """Base error for conversion failures."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.detail = detail


class InputMissingError(ConverterError):
    """No input data was supplied."""


class InvalidJsonError(ConverterError):
    """Input expected to be a JSON object could not be parsed as one."""


class FileReadError(ConverterError):
    """Input file could not be read."""
