import asyncio
from unittest.mock import MagicMock

import pytest

from resume_extractor.config import ExtractorConfig, ModelConfig
from resume_extractor.exceptions import (
    ExtractionError,
    InsufficientTextError,
    ModelResponseInvalidError,
    ModelUnavailableError,
    UnsupportedFormatError,
)
from resume_extractor.extractor import ResumeTextExtractor
from resume_extractor.handler import ResumeExtractionService
from resume_extractor.llm import CompletionClient
from resume_extractor.models import CandidateFields, DocumentFormat, FieldSource


def run_extract(service, file_bytes, file_name, mime_type=None):
    return asyncio.run(service.extract(file_bytes, file_name, mime_type))


class TestResumeExtractionService:
    def test_fields_come_from_model(
        self, extraction_service, sample_resume_text, sample_fields
    ):
        result = run_extract(
            extraction_service, sample_resume_text.encode(), "resume.txt", "text/plain"
        )

        assert result.fields == CandidateFields(**sample_fields)
        assert result.source is FieldSource.MODEL
        assert result.document_format is DocumentFormat.TEXT
        assert result.character_count == len(sample_resume_text)

    def test_docx_upload_runs_the_whole_pipeline(
        self, extraction_service, sample_docx_bytes, mock_openai_client
    ):
        result = run_extract(extraction_service, sample_docx_bytes, "resume.docx")

        assert result.source is FieldSource.MODEL
        prompt = mock_openai_client.chat.completions.create.call_args.kwargs["messages"][1]
        assert "jane.doe@example.com" in prompt["content"]

    def test_short_text_never_reaches_model(self, extraction_service, mock_openai_client):
        with pytest.raises(InsufficientTextError) as exc_info:
            run_extract(extraction_service, b"hi", "resume.txt")

        assert exc_info.value.status_code == 400
        assert mock_openai_client.chat.completions.create.call_count == 0

    def test_whitespace_padding_does_not_pass_quality_gate(
        self, extraction_service, mock_openai_client
    ):
        with pytest.raises(InsufficientTextError):
            run_extract(extraction_service, b"   Jane Doe" + b" " * 40, "resume.txt")

        mock_openai_client.chat.completions.create.assert_not_called()

    def test_unsupported_format_reads_no_bytes(self, extraction_service, mock_openai_client):
        file_bytes = MagicMock(spec=bytes)
        extractor = MagicMock(spec=ResumeTextExtractor)
        service = ResumeExtractionService(
            extractor_config=ExtractorConfig(),
            extractor=extractor,
            completion_client=extraction_service.completion_client,
        )

        with pytest.raises(UnsupportedFormatError):
            run_extract(service, file_bytes, "resume.xyz", "application/octet-stream")

        extractor.extract.assert_not_called()
        assert file_bytes.mock_calls == []
        mock_openai_client.chat.completions.create.assert_not_called()

    def test_invalid_model_json_uses_regex_fallback(
        self, extraction_service, mock_openai_client, completion_response
    ):
        mock_openai_client.chat.completions.create.return_value = completion_response(
            "Sure! The candidate is John Smith."
        )
        text = "John Smith\njohn@example.com\n(415) 555-0100"

        result = run_extract(extraction_service, text.encode(), "resume.txt")

        assert result.source is FieldSource.FALLBACK
        assert result.fields == CandidateFields(
            full_name="John Smith",
            email="john@example.com",
            phone="(415) 555-0100",
        )

    def test_fenced_model_reply_is_used(
        self, extraction_service, mock_openai_client, completion_response, sample_resume_text
    ):
        mock_openai_client.chat.completions.create.return_value = completion_response(
            '```json\n{"full_name":"A","email":null,"phone":null}\n```'
        )

        result = run_extract(extraction_service, sample_resume_text.encode(), "resume.txt")

        assert result.source is FieldSource.MODEL
        assert result.fields == CandidateFields(full_name="A")

    def test_model_reported_error_fails_request(
        self, extraction_service, mock_openai_client, completion_response, sample_resume_text
    ):
        mock_openai_client.chat.completions.create.return_value = completion_response(
            '{"error": "not a resume"}'
        )

        with pytest.raises(ModelResponseInvalidError):
            run_extract(extraction_service, sample_resume_text.encode(), "resume.txt")

    def test_missing_credential_reaches_model_unavailable(
        self, mock_openai_client, sample_resume_text
    ):
        service = ResumeExtractionService(
            completion_client=CompletionClient(ModelConfig(), client=mock_openai_client)
        )

        with pytest.raises(ModelUnavailableError) as exc_info:
            run_extract(service, sample_resume_text.encode(), "resume.txt")

        assert exc_info.value.status_code == 500
        mock_openai_client.chat.completions.create.assert_not_called()

    def test_identical_input_yields_identical_fields(
        self, extraction_service, sample_pdf_bytes
    ):
        first = run_extract(extraction_service, sample_pdf_bytes, "resume.pdf")
        second = run_extract(extraction_service, sample_pdf_bytes, "resume.pdf")

        assert first.fields == second.fields
        assert first.source is second.source

    def test_extraction_errors_propagate(self, extraction_service):
        with pytest.raises(ExtractionError):
            run_extract(extraction_service, b"Jane \xff Doe resume text here", "resume.txt")

    def test_gate_threshold_follows_extractor_config(self, extraction_service):
        service = ResumeExtractionService(
            extractor=ResumeTextExtractor(ExtractorConfig(min_text_length=500)),
            completion_client=extraction_service.completion_client,
        )

        assert service.extractor_config.min_text_length == 500
        with pytest.raises(InsufficientTextError):
            service.check_text_quality("Jane Doe jane.doe@example.com")
