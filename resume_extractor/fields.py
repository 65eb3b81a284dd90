"""Candidate field parsing: model replies and the regex fallback."""

import json
import re
from typing import Any, Optional

from resume_extractor.exceptions import ModelResponseInvalidError
from resume_extractor.logger import get_logger
from resume_extractor.models import CandidateFields

logger = get_logger(__name__)


FIELD_NAMES = ("full_name", "email", "phone")

CODE_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
CODE_FENCE_CLOSE_RE = re.compile(r"\s*```$")

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
# North American numbers only: optional +1, optional (area code), -/./space separators.
# International formats are not matched.
PHONE_RE = re.compile(
    r"(?<![\d+])(?:\+1[\s.-]?)?(?:\(\d{3}\)|\d{3})[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)"
)
_NAME_WORD = r"[A-Z][a-z]+(?:['-][A-Z]?[a-z]+)*"
# Assumes the header line starts with the candidate's first and last name
NAME_RE = re.compile(rf"^[ \t]*({_NAME_WORD} {_NAME_WORD})\b", re.MULTILINE)


def strip_code_fence(content: str) -> str:
    """Remove a Markdown ```json ... ``` wrapper if the model added one."""
    text = content.strip()
    text = CODE_FENCE_OPEN_RE.sub("", text)
    text = CODE_FENCE_CLOSE_RE.sub("", text)
    return text.strip()


def _coerce_field(value: Any) -> tuple[bool, Optional[str]]:
    """Return (valid, value) for one field; blank strings become None."""
    if value is None:
        return True, None
    if isinstance(value, str):
        return True, value.strip() or None
    return False, None


def parse_model_reply(content: str) -> Optional[CandidateFields]:
    """Parse a model reply into candidate fields.

    The reply is loaded into a loose map first, then exactly the three expected
    keys are checked for presence and type. Extra keys are ignored.

    Returns:
        CandidateFields, or None when the reply is empty, not JSON, not an
        object, or fails validation. None means "use the regex fallback".

    Raises:
        ModelResponseInvalidError: If the model replied with an explicit
            ``{"error": ...}`` object.
    """
    text = strip_code_fence(content or "")
    if not text:
        logger.warning("Model reply is empty")
        return None

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning(
            "Model reply is not valid JSON",
            extra_data={"error": str(exc), "reply_characters": len(text)},
        )
        return None

    if not isinstance(payload, dict):
        logger.warning(
            "Model reply is not a JSON object",
            extra_data={"payload_type": type(payload).__name__},
        )
        return None

    if payload.get("error"):
        logger.warning("Model reported an extraction error")
        raise ModelResponseInvalidError(
            f"Model could not extract candidate details: {payload['error']}"
        )

    values = {}
    for name in FIELD_NAMES:
        if name not in payload:
            logger.warning("Model reply is missing a field", extra_data={"field": name})
            return None
        valid, value = _coerce_field(payload[name])
        if not valid:
            logger.warning(
                "Model reply has a non-string field",
                extra_data={"field": name, "value_type": type(payload[name]).__name__},
            )
            return None
        values[name] = value

    return CandidateFields(**values)


def extract_fields_with_regex(text: str) -> CandidateFields:
    """Best-effort field recovery straight from the resume text. Never raises."""
    email_match = EMAIL_RE.search(text)
    phone_match = PHONE_RE.search(text)
    name_match = NAME_RE.search(text)

    fields = CandidateFields(
        full_name=name_match.group(1) if name_match else None,
        email=email_match.group(0) if email_match else None,
        phone=phone_match.group(0) if phone_match else None,
    )
    logger.info(
        "Regex fallback extraction completed",
        extra_data={
            "full_name_found": fields.full_name is not None,
            "email_found": fields.email is not None,
            "phone_found": fields.phone is not None,
        },
    )
    return fields
