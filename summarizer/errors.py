from typing import Optional


class SummarizerError(Exception):
    """Base error carrying the user-facing message and HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputError(SummarizerError):
    status_code = 400


class ConfigError(SummarizerError):
    status_code = 500


class FetchError(SummarizerError):
    status_code = 400


class ExtractionError(SummarizerError):
    status_code = 400


class ProviderError(SummarizerError):
    status_code = 500


__all__ = [
    "SummarizerError",
    "InputError",
    "ConfigError",
    "FetchError",
    "ExtractionError",
    "ProviderError",
]
