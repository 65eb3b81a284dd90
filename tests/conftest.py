import io
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from docx import Document
from fastapi.testclient import TestClient

from resume_extractor.api import create_app
from resume_extractor.config import ExtractorConfig, ModelConfig, Settings
from resume_extractor.handler import ResumeExtractionService
from resume_extractor.llm import CompletionClient


def make_completion(content):
    """Build an object shaped like an OpenAI chat-completion response"""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.fixture
def sample_fields():
    return {
        "full_name": "Jane Doe",
        "email": "jane.doe@example.com",
        "phone": "+1 415-555-0199",
    }


@pytest.fixture
def sample_resume_text():
    return (
        "Jane Doe\n"
        "jane.doe@example.com | +1 415-555-0199\n"
        "Senior Backend Engineer at Acme Corp (hr@acme.example)\n"
        "Experience: 8 years building Python services."
    )


@pytest.fixture
def mock_openai_client(sample_fields):
    """Mock AsyncOpenAI client replying with the sample fields"""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=make_completion(json.dumps(sample_fields))
    )
    return client


@pytest.fixture
def model_config():
    return ModelConfig(api_key="test-key")


@pytest.fixture
def completion_client(model_config, mock_openai_client):
    return CompletionClient(model_config, client=mock_openai_client)


@pytest.fixture
def extraction_service(completion_client):
    """Extraction service with mocked completion endpoint"""
    return ResumeExtractionService(
        extractor_config=ExtractorConfig(),
        completion_client=completion_client,
    )


@pytest.fixture
def client(extraction_service):
    """Test client wired to the mocked extraction service"""
    app = create_app(
        settings=Settings(openai_api_key="test-key"), service=extraction_service
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_pdf_bytes():
    """Minimal PDF with one uncompressed content stream"""
    return (
        b"%PDF-1.4\n"
        b"1 0 obj\n<< /Length 68 >>\n"
        b"stream\n"
        b"BT /F1 12 Tf 72 712 Td (Jane Doe jane.doe@example.com) Tj ET\n"
        b"endstream\nendobj\n"
        b"%%EOF\n"
    )


@pytest.fixture
def sample_docx_bytes(sample_resume_text):
    """DOCX resume built in memory with python-docx"""
    document = Document()
    for line in sample_resume_text.splitlines():
        document.add_paragraph(line)
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Location"
    table.rows[0].cells[1].text = "San Francisco"

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def completion_response():
    """Factory for chat-completion responses with the given reply content"""
    return make_completion
