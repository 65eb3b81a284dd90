"""Custom exceptions for resume extraction."""


class ResumeExtractorError(Exception):
    """Base exception for resume extraction errors.

    Subclasses carry the error ``kind`` reported in logs and the HTTP status
    the API layer answers with.
    """

    kind = "resume_extractor_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFormatError(ResumeExtractorError):
    """Raised when the document is not a PDF, DOCX or plain-text file."""

    kind = "unsupported_format"
    status_code = 400


class ExtractionError(ResumeExtractorError):
    """Raised when text extraction fails."""

    kind = "extraction_failed"
    status_code = 400


class DecodingError(ExtractionError):
    """Raised when a plain-text upload is not valid UTF-8."""

    pass


class InsufficientTextError(ResumeExtractorError):
    """Raised when the extracted text is too short to hold candidate details."""

    kind = "insufficient_text"
    status_code = 400


class ModelUnavailableError(ResumeExtractorError):
    """Raised when the completion endpoint is unconfigured or the call fails."""

    kind = "model_unavailable"
    status_code = 500


class ModelResponseInvalidError(ResumeExtractorError):
    """Raised when the model explicitly reports that it could not extract."""

    kind = "model_response_invalid"
    status_code = 500
