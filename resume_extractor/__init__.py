"""Resume text and candidate field extraction."""

from resume_extractor.config import ExtractorConfig, ModelConfig, Settings
from resume_extractor.detector import DocumentDescriptor, DocumentDetector
from resume_extractor.exceptions import (
    DecodingError,
    ExtractionError,
    InsufficientTextError,
    ModelResponseInvalidError,
    ModelUnavailableError,
    ResumeExtractorError,
    UnsupportedFormatError,
)
from resume_extractor.extractor import ResumeTextExtractor
from resume_extractor.fields import extract_fields_with_regex, parse_model_reply
from resume_extractor.handler import ResumeExtractionService
from resume_extractor.llm import CompletionClient
from resume_extractor.models import (
    CandidateFields,
    DocumentFormat,
    FieldSource,
    ResumeExtractionResult,
)
from resume_extractor.parser import parse_resume

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "parse_resume",
    # Core classes
    "ResumeExtractionService",
    "DocumentDetector",
    "ResumeTextExtractor",
    "CompletionClient",
    "parse_model_reply",
    "extract_fields_with_regex",
    # Data models
    "CandidateFields",
    "DocumentDescriptor",
    "DocumentFormat",
    "FieldSource",
    "ResumeExtractionResult",
    # Configuration
    "ExtractorConfig",
    "ModelConfig",
    "Settings",
    # Exceptions
    "ResumeExtractorError",
    "UnsupportedFormatError",
    "ExtractionError",
    "DecodingError",
    "InsufficientTextError",
    "ModelUnavailableError",
    "ModelResponseInvalidError",
]
