"""Client helper for callers of the resume-parse endpoint."""

import mimetypes
from pathlib import Path
from typing import Optional, Union

import requests

from resume_extractor.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60


class ResumeParseRequestError(Exception):
    """Raised when the resume-parse endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"Resume extraction failed ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


def extract_candidate_details(
    resume: Union[str, Path, bytes],
    base_url: str,
    file_name: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict:
    """Upload a resume and return the extracted ``full_name``/``email``/``phone``.

    Persisting the fields into a candidate record is left to the caller.

    Args:
        resume: Path to the resume, or its raw bytes
        base_url: Service root, e.g. ``http://localhost:8000``
        file_name: Required when ``resume`` is bytes
        session: Optional ``requests.Session`` to reuse connections
        timeout: Request timeout in seconds

    Raises:
        ValueError: If bytes are given without a file name
        ResumeParseRequestError: If the service rejects the upload
    """
    if isinstance(resume, (str, Path)):
        path = Path(resume)
        file_bytes = path.read_bytes()
        file_name = file_name or path.name
    else:
        file_bytes = resume

    if not file_name:
        raise ValueError("file_name is required when uploading raw bytes")

    content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
    http = session or requests
    response = http.post(
        f"{base_url.rstrip('/')}/resume-parse",
        files={"resume": (file_name, file_bytes, content_type)},
        timeout=timeout,
    )

    if not response.ok:
        try:
            message = response.json().get("error") or response.reason
        except ValueError:
            message = response.text or response.reason
        logger.warning(
            "Resume parse request failed",
            extra_data={"file_name": file_name, "status_code": response.status_code},
        )
        raise ResumeParseRequestError(response.status_code, message)

    return response.json()["result"]
