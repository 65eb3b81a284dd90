from unittest.mock import MagicMock, patch

import pytest

from resume_extractor.client import ResumeParseRequestError, extract_candidate_details


def make_response(status_code, payload=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.json.return_value = payload
    return response


class TestExtractCandidateDetails:
    def test_uploads_file_path_as_resume_field(self, tmp_path, sample_fields):
        resume = tmp_path / "jane_doe.pdf"
        resume.write_bytes(b"%PDF-1.4 resume")

        with patch("resume_extractor.client.requests.post") as mock_post:
            mock_post.return_value = make_response(200, {"result": sample_fields})
            result = extract_candidate_details(resume, "http://localhost:8000/")

        assert result == sample_fields
        args, kwargs = mock_post.call_args
        assert args[0] == "http://localhost:8000/resume-parse"
        assert kwargs["files"]["resume"] == (
            "jane_doe.pdf",
            b"%PDF-1.4 resume",
            "application/pdf",
        )

    def test_uploads_raw_bytes_with_session(self, sample_fields):
        session = MagicMock()
        session.post.return_value = make_response(200, {"result": sample_fields})

        result = extract_candidate_details(
            b"Jane Doe", "http://svc", file_name="resume.txt", session=session
        )

        assert result == sample_fields
        assert session.post.call_args.kwargs["files"]["resume"][2] == "text/plain"

    def test_bytes_without_file_name_are_rejected(self):
        with pytest.raises(ValueError):
            extract_candidate_details(b"Jane Doe", "http://svc")

    def test_error_response_raises(self):
        with patch("resume_extractor.client.requests.post") as mock_post:
            mock_post.return_value = make_response(
                400, {"error": "Missing resume file."}, reason="Bad Request"
            )
            with pytest.raises(ResumeParseRequestError) as exc_info:
                extract_candidate_details(b"x", "http://svc", file_name="resume.txt")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Missing resume file."

    def test_non_json_error_uses_reason(self):
        response = make_response(502, reason="Bad Gateway")
        response.json.side_effect = ValueError("no json")
        response.text = ""

        with patch("resume_extractor.client.requests.post", return_value=response):
            with pytest.raises(ResumeParseRequestError) as exc_info:
                extract_candidate_details(b"x", "http://svc", file_name="resume.txt")

        assert exc_info.value.message == "Bad Gateway"
