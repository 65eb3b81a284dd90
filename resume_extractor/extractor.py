"""Format-specific resume text extraction.

Each format is read with the most precise strategy first and a crude
byte-scraping strategy as the safety net, so that damaged or unusual files
still yield whatever readable text they contain.
"""

import html
import io
import re
from typing import Optional

import fitz  # PyMuPDF
import pymupdf4llm
from docx import Document

from resume_extractor.config import ExtractorConfig
from resume_extractor.detector import DocumentDescriptor
from resume_extractor.exceptions import DecodingError, ExtractionError
from resume_extractor.logger import Timer, get_logger
from resume_extractor.models import DocumentFormat

logger = get_logger(__name__)


NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E]+")
WHITESPACE_RE = re.compile(r"\s+")
# "endstream" has no word boundary before its "stream", so regions never nest
PDF_STREAM_RE = re.compile(r"\bstream\b(.*?)\bendstream\b", re.DOTALL)
# <w:t> and <w:t xml:space="preserve">, but not <w:tab/> or <w:tbl>
DOCX_TEXT_RUN_RE = re.compile(r"<w:t(?:\s[^>]*)?>(.*?)</w:t>", re.DOTALL)
XML_TAG_RE = re.compile(r"<[^>]+>")


def decode_permissive(file_bytes: bytes) -> str:
    """Decode bytes as UTF-8, dropping a BOM and any invalid sequences."""
    return file_bytes.decode("utf-8", errors="ignore").lstrip("\ufeff")


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


def scrub_printable(text: str) -> str:
    """Replace non-printable ASCII with spaces and collapse whitespace."""
    return collapse_whitespace(NON_PRINTABLE_RE.sub(" ", text))


class ResumeTextExtractor:
    """Extracts readable text from PDF, DOCX and plain-text resumes.

    Everything happens in memory; no temporary files are written.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()

    def extract(self, file_bytes: bytes, descriptor: DocumentDescriptor) -> str:
        """Extract text from a routed document.

        Args:
            file_bytes: Raw upload bytes
            descriptor: Routing result from ``DocumentDetector``

        Returns:
            Extracted text (may be shorter than the quality threshold)

        Raises:
            ExtractionError: If extraction fails
            DecodingError: If a plain-text upload is not valid UTF-8
        """
        file_name = descriptor.file_name
        document_format = descriptor.document_format

        logger.debug(
            "Starting text extraction",
            extra_data={
                "file_name": file_name,
                "document_format": document_format.value,
                "file_size_bytes": len(file_bytes),
            },
        )

        try:
            if document_format is DocumentFormat.PDF:
                return self._extract_pdf(file_bytes, file_name)
            if document_format is DocumentFormat.DOCX:
                return self._extract_docx(file_bytes, file_name)
            return self._extract_text(file_bytes, file_name)
        except ExtractionError:
            raise
        except Exception as exc:
            logger.error(
                "Text extraction failed",
                extra_data={
                    "file_name": file_name,
                    "document_format": document_format.value,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
                exc_info=True,
            )
            raise ExtractionError(
                f"Failed to extract text from {document_format.value.upper()}: {exc}"
            ) from exc

    def _extract_pdf(self, file_bytes: bytes, file_name: str = "unknown.pdf") -> str:
        """PyMuPDF decode, then ``stream`` region scan, then whole-buffer scrape."""
        # The region scan reads Flate-compressed streams as noise, so the real
        # decoder goes first when enabled
        if self.config.pdf_decoder_enabled:
            decoded = self._decode_pdf(file_bytes, file_name)
            if len(decoded.strip()) >= self.config.min_text_length:
                return decoded

        raw = decode_permissive(file_bytes)

        with Timer("pdf_stream_scan") as scan_timer:
            text = self._scan_pdf_streams(raw)

        logger.debug(
            "PDF stream scan completed",
            extra_data={
                "file_name": file_name,
                "characters_extracted": len(text),
                "scan_time_ms": scan_timer.get_elapsed_ms(),
            },
        )

        if len(text) >= self.config.min_text_length:
            return text

        scraped = scrub_printable(raw)
        logger.info(
            "Falling back to raw PDF byte scrape",
            extra_data={
                "file_name": file_name,
                "stream_characters": len(text),
                "characters_extracted": len(scraped),
            },
        )
        return scraped

    def _scan_pdf_streams(self, raw: str) -> str:
        regions = []
        for match in PDF_STREAM_RE.finditer(raw):
            region = scrub_printable(match.group(1))
            if len(region) >= self.config.pdf_stream_min_chars:
                regions.append(region)
        return " ".join(regions)

    def _decode_pdf(self, file_bytes: bytes, file_name: str) -> str:
        """Render the PDF to markdown with PyMuPDF; empty string on failure."""
        try:
            with Timer("pdf_decode") as timer:
                with fitz.open(stream=file_bytes, filetype="pdf") as document:
                    page_count = document.page_count
                    md_text = pymupdf4llm.to_markdown(
                        document,
                        force_text=True,
                        write_images=False,
                        ignore_images=True,
                        fontsize_limit=3,
                    )
        except Exception as exc:
            logger.warning(
                "PyMuPDF could not decode PDF",
                extra_data={
                    "file_name": file_name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return ""

        text = md_text.strip()
        logger.debug(
            "PDF decoded with PyMuPDF",
            extra_data={
                "file_name": file_name,
                "page_count": page_count,
                "characters_extracted": len(text),
                "decode_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text

    def _extract_docx(self, file_bytes: bytes, file_name: str = "unknown.docx") -> str:
        """python-docx, then ``<w:t>`` run scan, then raw byte scrape."""
        if self.config.docx_structural_enabled:
            text = self._parse_docx_package(file_bytes, file_name)
            if text:
                return text

        raw = decode_permissive(file_bytes)
        runs = DOCX_TEXT_RUN_RE.findall(raw)
        if runs:
            text = collapse_whitespace(
                " ".join(html.unescape(XML_TAG_RE.sub("", run)) for run in runs)
            )
            if text:
                logger.debug(
                    "DOCX text runs matched in raw buffer",
                    extra_data={
                        "file_name": file_name,
                        "run_count": len(runs),
                        "characters_extracted": len(text),
                    },
                )
                return text

        scraped = scrub_printable(raw)
        logger.info(
            "Falling back to raw DOCX byte scrape",
            extra_data={"file_name": file_name, "characters_extracted": len(scraped)},
        )
        return scraped

    def _parse_docx_package(self, file_bytes: bytes, file_name: str) -> str:
        """Read ``word/document.xml`` through python-docx; empty string on failure."""
        try:
            with Timer("docx_extraction") as timer:
                document = Document(io.BytesIO(file_bytes))

                paragraphs = [
                    para.text.strip() for para in document.paragraphs if para.text.strip()
                ]

                table_rows = []
                for table in document.tables:
                    for row in table.rows:
                        cells = [cell.text.strip() for cell in row.cells]
                        if any(cells):
                            table_rows.append(" | ".join(cells))

                text = "\n".join(paragraphs + table_rows).strip()
        except Exception as exc:
            logger.warning(
                "python-docx could not open document",
                extra_data={
                    "file_name": file_name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return ""

        logger.debug(
            "DOCX extraction completed",
            extra_data={
                "file_name": file_name,
                "paragraph_count": len(paragraphs),
                "table_row_count": len(table_rows),
                "characters_extracted": len(text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text

    def _extract_text(self, file_bytes: bytes, file_name: str = "unknown.txt") -> str:
        try:
            return file_bytes.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            logger.error(
                "Failed to decode plain text file as UTF-8",
                extra_data={"file_name": file_name, "file_size_bytes": len(file_bytes)},
            )
            raise DecodingError("Unable to decode text file (not valid UTF-8)") from exc
