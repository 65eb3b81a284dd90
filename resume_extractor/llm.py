"""Async chat-completion client for candidate field extraction."""

from typing import Optional

import openai
from openai import AsyncOpenAI

from resume_extractor.config import ModelConfig
from resume_extractor.exceptions import ModelUnavailableError
from resume_extractor.logger import Timer, get_logger
from resume_extractor.prompts import build_messages

logger = get_logger(__name__)


class CompletionClient:
    """Sends one extraction prompt per resume to an OpenAI-compatible endpoint.

    There is no retry loop: a failed call surfaces immediately and the caller
    decides whether to resubmit the document.
    """

    def __init__(self, config: ModelConfig, client: Optional[AsyncOpenAI] = None):
        """Initialize completion client.

        Args:
            config: Model configuration, including the credential.
            client: Preconfigured SDK client. If None, one is created lazily on
                the first call.
        """
        self.config = config
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        # Checked even for injected clients so that no request leaves without a key
        if not self.config.has_credential:
            logger.error("Completion API key is not configured")
            raise ModelUnavailableError("OpenAI API key is not configured.")
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def complete(self, resume_text: str) -> str:
        """Ask the model for candidate fields.

        Args:
            resume_text: Extracted resume text; truncated to the configured prefix.

        Returns:
            The raw reply content (possibly empty)

        Raises:
            ModelUnavailableError: If no credential is configured or the call fails
        """
        client = self._get_client()
        messages = build_messages(resume_text, self.config.prompt_char_limit)

        try:
            with Timer("completion") as timer:
                response = await client.chat.completions.create(
                    model=self.config.model,
                    messages=messages,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                )
        except openai.APIStatusError as exc:
            logger.error(
                "Completion endpoint returned an error status",
                extra_data={"model": self.config.model, "status_code": exc.status_code},
            )
            raise ModelUnavailableError(
                f"Completion endpoint returned status {exc.status_code}."
            ) from exc
        except openai.OpenAIError as exc:
            logger.error(
                "Completion call failed",
                extra_data={
                    "model": self.config.model,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise ModelUnavailableError(f"Completion call failed: {exc}") from exc

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        logger.info(
            "Completion received",
            extra_data={
                "model": self.config.model,
                "reply_characters": len(content),
                "completion_time_ms": timer.get_elapsed_ms(),
            },
        )
        return content
