import io
import logging
import os
from typing import List, Optional

import docx
import fitz  # PyMuPDF
from pdfminer.high_level import extract_text as pdfminer_extract_text

PDF_TEXT_MIN_LENGTH = 80  # Heuristic threshold to trigger the pdfminer fallback

PDF_CONTENT_TYPE = "application/pdf"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_CONTENT_TYPE = "text/plain"
SUPPORTED_CONTENT_TYPES = (PDF_CONTENT_TYPE, DOCX_CONTENT_TYPE, TEXT_CONTENT_TYPE)

EXTENSION_CONTENT_TYPES = {
    ".pdf": PDF_CONTENT_TYPE,
    ".docx": DOCX_CONTENT_TYPE,
    ".txt": TEXT_CONTENT_TYPE,
}

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """Base class for failures turning an uploaded document into text."""


class UnsupportedDocumentError(DocumentError):
    pass


class DocumentDecodeError(DocumentError):
    pass


def resolve_content_type(content_type: Optional[str], filename: str = "") -> str:
    """Normalise a declared content type, falling back to the file extension."""
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared and declared != "application/octet-stream":
        return declared
    ext = os.path.splitext(filename or "")[1].lower()
    return EXTENSION_CONTENT_TYPES.get(ext, declared)


def extract_text(data: bytes, content_type: Optional[str], filename: str = "") -> str:
    """Decode PDF, DOCX, or TXT bytes into normalized text."""
    resolved = resolve_content_type(content_type, filename)
    if resolved not in SUPPORTED_CONTENT_TYPES:
        raise UnsupportedDocumentError(
            f"Unsupported file type '{resolved or 'unknown'}'. Only PDF, DOCX and text files are allowed."
        )

    try:
        if resolved == PDF_CONTENT_TYPE:
            text = _extract_pdf_text(data, filename)
        elif resolved == DOCX_CONTENT_TYPE:
            text = _extract_docx_text(data)
        else:
            text = _extract_txt_text(data)
    except DocumentError:
        raise
    except Exception as exc:
        raise DocumentDecodeError(f"Could not read {filename or 'document'}: {exc}") from exc

    return _normalize_text(text)


def _extract_pdf_text(data: bytes, filename: str = "") -> str:
    """Attempt PyMuPDF, fall back to pdfminer for sparse output."""
    text = ""
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            text = "\n".join(page.get_text("text", sort=True) for page in doc)
    except Exception as exc:
        logger.warning("PyMuPDF could not read %s: %s", filename or "PDF upload", exc)

    if len(text.strip()) < PDF_TEXT_MIN_LENGTH:
        try:
            fallback = pdfminer_extract_text(io.BytesIO(data)) or ""
        except Exception as exc:
            logger.warning("pdfminer fallback failed for %s: %s", filename or "PDF upload", exc)
        else:
            if len(fallback.strip()) > len(text.strip()):
                logger.info("pdfminer fallback used for %s", filename or "PDF upload")
                text = fallback

    if not text.strip():
        raise DocumentDecodeError(f"Unable to extract text from PDF {filename}".strip())
    return text


def _extract_docx_text(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    return "\n".join(para.text for para in document.paragraphs)


def _extract_txt_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


# Glyphs that PDF and Word exports leave where plain ASCII reads better.
# The private-use bullet is what Symbol-font list markers decode to.
BULLET_GLYPHS = "\N{BULLET}\N{TRIANGULAR BULLET}\N{WHITE BULLET}\N{HYPHEN BULLET}\N{MIDDLE DOT}" + chr(0xF0B7)
DASH_GLYPHS = "\N{HYPHEN}\N{FIGURE DASH}\N{EN DASH}\N{EM DASH}\N{HORIZONTAL BAR}\N{MINUS SIGN}"

ASCII_FOLDING = str.maketrans(
    {
        **dict.fromkeys(BULLET_GLYPHS + DASH_GLYPHS, "-"),
        "\N{LEFT SINGLE QUOTATION MARK}": "'",
        "\N{RIGHT SINGLE QUOTATION MARK}": "'",
        "\N{LEFT DOUBLE QUOTATION MARK}": '"',
        "\N{RIGHT DOUBLE QUOTATION MARK}": '"',
        "\N{LATIN SMALL LIGATURE FI}": "fi",
        "\N{LATIN SMALL LIGATURE FL}": "fl",
        "\N{NO-BREAK SPACE}": " ",
        "\N{SOFT HYPHEN}": None,
    }
)


def _normalize_text(text: str) -> str:
    """Fold export glyphs to ASCII, trim line ends and keep at most one blank line in a row."""
    lines: List[str] = []
    for line in text.translate(ASCII_FOLDING).splitlines():
        line = line.rstrip()
        if not line and lines and not lines[-1]:
            continue
        lines.append(line)
    return "\n".join(lines).strip()
