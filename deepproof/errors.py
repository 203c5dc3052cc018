"""Error types shared by the adapters, the HTTP endpoints and the pipeline."""

from typing import Optional


class DeepProofError(RuntimeError):
    """Base class for every failure the pipeline knows how to report."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DeepProofError):
    """Input rejected before any remote call was made."""

    status_code = 400


class TransportError(DeepProofError):
    """A remote call returned a non-success status or never completed."""

    status_code = 500


class MalformedResponseError(DeepProofError):
    """The remote call succeeded but its payload broke the expected shape."""

    status_code = 502


class MetadataError(DeepProofError):
    """The video decoder could not read the uploaded media."""

    status_code = 500
