"""Error taxonomy for the slicing service.

Each error carries the HTTP status the boundary layer answers with, so
handlers map errors by type instead of inspecting messages.
"""


class SlicerError(Exception):
    """Base class for all errors raised by the slicing core."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(SlicerError):
    """Missing or malformed request input."""

    status_code = 400


class OutOfRange(SlicerError):
    """Slice index lies beyond the image extent."""

    status_code = 404


class FetchError(SlicerError):
    """The source image could not be retrieved."""

    status_code = 500


class ExtractionError(SlicerError):
    """The codec failed to decode, crop or encode an image."""

    status_code = 500


class InternalError(SlicerError):
    """Any failure not covered by a more specific error."""

    status_code = 500


__all__ = [
    "SlicerError",
    "InvalidRequest",
    "OutOfRange",
    "FetchError",
    "ExtractionError",
    "InternalError",
]
