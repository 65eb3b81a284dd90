"""Configuration for resume extraction."""

from dataclasses import dataclass
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass
class ExtractorConfig:
    """Configuration for text extraction and the quality gate.

    Examples:
        >>> # Defaults suit typical one-to-two page resumes
        >>> config = ExtractorConfig()

        >>> # Stricter gate for noisy scanned uploads
        >>> config = ExtractorConfig(min_text_length=80)
    """

    min_text_length: int = 20
    """Minimum stripped characters required before the model is called.

    Roughly enough room for a name and an email address. Anything shorter is
    rejected as insufficient text.
    """

    pdf_stream_min_chars: int = 10
    """Minimum printable characters a PDF ``stream`` region must contain to be kept.

    Shorter regions are binary noise (font tables, image headers) rather than text.
    """

    pdf_decoder_enabled: bool = True
    """Decode PDFs with PyMuPDF before trying the ``stream`` region scan.

    The region scan cannot read Flate-compressed streams, which most PDF
    writers emit. Disable to keep extraction to the pure heuristic path.
    """

    docx_structural_enabled: bool = True
    """Parse DOCX archives with python-docx before falling back to regex scanning."""


@dataclass
class ModelConfig:
    """Configuration for the language-model completion call.

    The credential is injected here once; nothing reads the environment per call.
    """

    api_key: Optional[str] = None
    """Completion API key. ``None`` or empty makes every model call unavailable."""

    model: str = "gpt-4o"
    """Chat-completions model id."""

    base_url: Optional[str] = None
    """Override for OpenAI-compatible gateways. ``None`` uses the SDK default."""

    max_tokens: int = 300
    """Upper bound on reply tokens. Three short fields fit easily."""

    temperature: float = 0.0
    """Sampling temperature. Zero keeps identical resumes yielding identical fields."""

    timeout_seconds: float = 30.0
    """Client-side timeout for the completion call."""

    prompt_char_limit: int = 6000
    """Resume text beyond this prefix is cut before prompting.

    The contact block sits at the top, so the prefix bounds cost and latency
    without losing the fields we extract.
    """

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class Settings(BaseSettings):
    """Environment-driven service settings (``.env`` supported)."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # App info
    app_name: str = "Resume Extraction Service"
    app_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    openai_base_url: Optional[str] = None
    completion_max_tokens: int = 300
    completion_timeout_seconds: float = 30.0
    prompt_char_limit: int = 6000

    # Extraction
    min_text_length: int = 20
    pdf_stream_min_chars: int = 10

    def to_model_config(self) -> ModelConfig:
        return ModelConfig(
            api_key=self.openai_api_key or None,
            model=self.openai_model,
            base_url=self.openai_base_url or None,
            max_tokens=self.completion_max_tokens,
            timeout_seconds=self.completion_timeout_seconds,
            prompt_char_limit=self.prompt_char_limit,
        )

    def to_extractor_config(self) -> ExtractorConfig:
        return ExtractorConfig(
            min_text_length=self.min_text_length,
            pdf_stream_min_chars=self.pdf_stream_min_chars,
        )
