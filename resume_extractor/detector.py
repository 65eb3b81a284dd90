"""Document format routing."""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional

from resume_extractor.exceptions import UnsupportedFormatError
from resume_extractor.logger import get_logger
from resume_extractor.models import DocumentFormat

logger = get_logger(__name__)


EXTENSION_FORMATS = {
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.DOCX,
    ".txt": DocumentFormat.TEXT,
}

# Checked in order against the lowercased content type
MIME_SUBSTRING_FORMATS = (
    ("pdf", DocumentFormat.PDF),
    ("wordprocessingml", DocumentFormat.DOCX),
    ("docx", DocumentFormat.DOCX),
    ("text/plain", DocumentFormat.TEXT),
)


@dataclass
class DocumentDescriptor:
    file_name: str
    mime_type: str
    document_format: DocumentFormat


class DocumentDetector:
    """Picks an extraction strategy from the declared file name and content type.

    Only the declared metadata is consulted, so an unsupported upload is
    rejected before any of its bytes are processed.
    """

    def detect(self, file_name: Optional[str], mime_type: Optional[str]) -> DocumentDescriptor:
        file_name = file_name or ""
        mime_type = mime_type or ""

        document_format = self._from_extension(file_name)
        matched_by = "extension"
        if document_format is None:
            document_format = self._from_mime(mime_type)
            matched_by = "mime_type"

        if document_format is None:
            logger.warning(
                "Unsupported document format",
                extra_data={"file_name": file_name, "mime_type": mime_type},
            )
            raise UnsupportedFormatError(
                "Unsupported file type. Only PDF, DOCX or TXT files are allowed."
            )

        logger.debug(
            "Document format detected",
            extra_data={
                "file_name": file_name,
                "mime_type": mime_type,
                "document_format": document_format.value,
                "matched_by": matched_by,
            },
        )
        return DocumentDescriptor(
            file_name=file_name,
            mime_type=mime_type,
            document_format=document_format,
        )

    @staticmethod
    def _from_extension(file_name: str) -> Optional[DocumentFormat]:
        suffix = PurePath(file_name).suffix.lower()
        return EXTENSION_FORMATS.get(suffix)

    @staticmethod
    def _from_mime(mime_type: str) -> Optional[DocumentFormat]:
        lowered = mime_type.lower()
        for needle, document_format in MIME_SUBSTRING_FORMATS:
            if needle in lowered:
                return document_format
        return None
