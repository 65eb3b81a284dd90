"""Prompts for candidate field extraction."""

SYSTEM_PROMPT = (
    "You are a helpful assistant for extracting candidate details from resumes."
)

EXTRACTION_PROMPT_TEMPLATE = """You are a very accurate resume parser. Extract the candidate details from the following resume TEXT.

Return ONLY a compact JSON object with exactly these fields: "full_name", "email", "phone".
- Use null for any field that is not present in the text.
- Extract only the applicant's own details. Ignore employer and company names, addresses and contact details, as well as cover letter content and job descriptions.
- Do not wrap the JSON in Markdown and do not add any other keys or commentary.

Example: {{"full_name": "Jane Doe", "email": "jane.doe@example.com", "phone": null}}

Resume text:
{resume_text}
"""


def build_extraction_prompt(resume_text: str, char_limit: int) -> str:
    """Build the user prompt from the first ``char_limit`` characters of the resume."""
    return EXTRACTION_PROMPT_TEMPLATE.format(resume_text=resume_text[:char_limit])


def build_messages(resume_text: str, char_limit: int) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_extraction_prompt(resume_text, char_limit)},
    ]
