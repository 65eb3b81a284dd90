"""Run the resume extraction service with uvicorn."""

import uvicorn

from resume_extractor.config import Settings
from resume_extractor.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    settings = Settings()
    setup_logging(settings.log_level)

    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; every parse will fail with 500")

    logger.info(
        "Starting resume extraction service",
        extra_data={"host": settings.host, "port": settings.port, "model": settings.openai_model},
    )
    uvicorn.run(
        "resume_extractor.api:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
