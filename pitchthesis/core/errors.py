# pitchthesis/core/errors.py

class PipelineError(Exception):
    """Base exception for everything raised by the analysis pipeline."""


class ValidationError(PipelineError):
    """Required input is missing or empty (no file, empty payload, empty text)."""


class ExtractionError(PipelineError):
    """The deck binary could not be parsed into slide text."""


class ModelError(PipelineError):
    """The completion service failed, timed out or returned nothing usable."""


class StorageError(PipelineError):
    """A blob-store put, sign or delete call failed."""


class NotFoundError(PipelineError):
    """No thesis record exists for the requested identifier."""


class RateLimitError(PipelineError):
    """The admission gate rejected the request."""
