"""High-level API for resume parsing."""

import asyncio
import mimetypes
from pathlib import Path
from typing import Optional

from resume_extractor.config import ExtractorConfig, ModelConfig
from resume_extractor.handler import ResumeExtractionService
from resume_extractor.models import ResumeExtractionResult


def parse_resume(
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    model_config: Optional[ModelConfig] = None,
    extractor_config: Optional[ExtractorConfig] = None,
) -> ResumeExtractionResult:
    """Parse a resume and extract candidate fields.

    Blocking convenience wrapper around ``ResumeExtractionService`` that
    accepts either a file path or raw bytes. Do not call it from inside a
    running event loop; await ``ResumeExtractionService.extract`` there instead.

    Args:
        file_path: Path to resume file (alternative to file_bytes)
        file_bytes: Raw resume bytes (alternative to file_path)
        file_name: Original filename (required if using file_bytes)
        mime_type: Content type hint (optional, guessed from the extension)
        model_config: Completion settings including the API key
        extractor_config: Extraction settings (optional, uses defaults)

    Returns:
        ResumeExtractionResult with candidate fields and metadata

    Raises:
        ValueError: If neither file_path nor file_bytes provided, or if
            file_bytes provided without file_name
        UnsupportedFormatError: If the file is not PDF, DOCX or TXT
        ExtractionError: If text extraction fails
        InsufficientTextError: If the file holds too little text
        ModelUnavailableError: If the model is unconfigured or unreachable
        ModelResponseInvalidError: If the model reports an explicit error

    Examples:
        >>> config = ModelConfig(api_key="sk-...")
        >>> result = parse_resume(file_path="resume.pdf", model_config=config)
        >>> print(result.fields.email)
    """
    if file_path and file_bytes:
        raise ValueError("Provide either file_path or file_bytes, not both")

    if not file_path and not file_bytes:
        raise ValueError("Must provide either file_path or file_bytes")

    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise ValueError(f"File not found: {file_path}")

        file_bytes = path.read_bytes()
        file_name = path.name

    if not file_name:
        raise ValueError("file_name is required when using file_bytes")

    if not mime_type:
        mime_type, _ = mimetypes.guess_type(file_name)

    service = ResumeExtractionService(
        model_config=model_config, extractor_config=extractor_config
    )
    return asyncio.run(
        service.extract(file_bytes=file_bytes, file_name=file_name, mime_type=mime_type)
    )
