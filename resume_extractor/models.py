"""Data models for resume extraction."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional


class DocumentFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TEXT = "txt"


class FieldSource(str, Enum):
    """Which pipeline stage produced the candidate fields."""

    MODEL = "model"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class CandidateFields:
    """Candidate details recovered from a resume. Missing fields are ``None``."""

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def to_dict(self) -> dict[str, Optional[str]]:
        return asdict(self)

    def is_empty(self) -> bool:
        return not (self.full_name or self.email or self.phone)


@dataclass
class ResumeExtractionResult:
    """Result of one pipeline run."""

    fields: CandidateFields
    source: FieldSource
    file_name: str
    document_format: DocumentFormat
    character_count: int
