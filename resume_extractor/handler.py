"""Resume extraction pipeline orchestration."""

import asyncio
from typing import Optional

from resume_extractor.config import ExtractorConfig, ModelConfig
from resume_extractor.detector import DocumentDetector
from resume_extractor.exceptions import InsufficientTextError
from resume_extractor.extractor import ResumeTextExtractor
from resume_extractor.fields import extract_fields_with_regex, parse_model_reply
from resume_extractor.llm import CompletionClient
from resume_extractor.logger import Timer, get_logger
from resume_extractor.models import FieldSource, ResumeExtractionResult

logger = get_logger(__name__)


class ResumeExtractionService:
    """Turns one uploaded resume into candidate fields.

    Stages: route by name/content type, extract text, apply the quality gate,
    ask the model, and fall back to regex matching when the reply is unusable.
    Instances hold configuration only, so one service can serve any number of
    concurrent requests.
    """

    def __init__(
        self,
        model_config: Optional[ModelConfig] = None,
        extractor_config: Optional[ExtractorConfig] = None,
        detector: Optional[DocumentDetector] = None,
        extractor: Optional[ResumeTextExtractor] = None,
        completion_client: Optional[CompletionClient] = None,
    ) -> None:
        """Initialize extraction service.

        Args:
            model_config: Completion settings and credential. Only used if
                completion_client is None.
            extractor_config: Extraction and quality-gate settings.
            detector: Format router. If None, creates default.
            extractor: Text extractor. If None, creates one with extractor_config.
            completion_client: Model client. If None, creates one with model_config.
        """
        if extractor_config is None:
            extractor_config = extractor.config if extractor else ExtractorConfig()
        self.extractor_config = extractor_config
        self.detector = detector or DocumentDetector()
        self.extractor = extractor or ResumeTextExtractor(config=self.extractor_config)
        self.completion_client = completion_client or CompletionClient(
            model_config or ModelConfig()
        )

    async def extract(
        self, file_bytes: bytes, file_name: str, mime_type: Optional[str] = None
    ) -> ResumeExtractionResult:
        """Extract candidate fields from an uploaded resume.

        Args:
            file_bytes: Raw upload bytes
            file_name: Declared file name
            mime_type: Declared content type

        Returns:
            ResumeExtractionResult with the fields and the stage that produced them

        Raises:
            UnsupportedFormatError: If the document is not PDF, DOCX or TXT
            ExtractionError: If text extraction fails
            InsufficientTextError: If too little text was recovered
            ModelUnavailableError: If the model is unconfigured or the call fails
            ModelResponseInvalidError: If the model reports an explicit error
        """
        descriptor = self.detector.detect(file_name=file_name, mime_type=mime_type)

        with Timer("extraction") as extract_timer:
            text = await asyncio.to_thread(self.extractor.extract, file_bytes, descriptor)

        self.check_text_quality(text, file_name)

        logger.info(
            "Extracted resume text",
            extra_data={
                "file_name": file_name,
                "document_format": descriptor.document_format.value,
                "character_count": len(text),
                "extraction_time_ms": extract_timer.get_elapsed_ms(),
            },
        )

        reply = await self.completion_client.complete(text)
        fields = parse_model_reply(reply)
        source = FieldSource.MODEL
        if fields is None:
            logger.info(
                "Model reply unusable, using regex fallback",
                extra_data={"file_name": file_name},
            )
            fields = extract_fields_with_regex(text)
            source = FieldSource.FALLBACK

        logger.info(
            "Candidate fields extracted",
            extra_data={
                "file_name": file_name,
                "source": source.value,
                "empty": fields.is_empty(),
            },
        )
        return ResumeExtractionResult(
            fields=fields,
            source=source,
            file_name=file_name,
            document_format=descriptor.document_format,
            character_count=len(text),
        )

    def check_text_quality(self, text: str, file_name: str = "") -> None:
        """Reject text too short to contain a name and an email address."""
        stripped_length = len(text.strip())
        if stripped_length < self.extractor_config.min_text_length:
            logger.warning(
                "Extracted text below quality threshold",
                extra_data={
                    "file_name": file_name,
                    "character_count": stripped_length,
                    "min_text_length": self.extractor_config.min_text_length,
                },
            )
            raise InsufficientTextError(
                "Could not extract text from resume. Is it valid?"
            )
