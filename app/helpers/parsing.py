"""
Best-effort text extraction from uploaded documents.

Every handler works on raw bytes. Failures never leave this module:
``extract_document`` reports them through ``ExtractionResult`` and
``extract_text`` collapses them to an empty string.
"""
import io
import mimetypes
import zipfile
from typing import Callable, Dict, Optional, Tuple
from pdfminer.high_level import extract_text as pdf_extract
from docx import Document
from unstructured.partition.auto import partition

from app.models.models import DocumentFormat, ExtractionResult
from app.utils.exceptions import ExtractionError
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def read_plain(raw: bytes) -> str:
    return raw.decode("utf-8", errors="ignore")


def read_docx(raw: bytes) -> str:
    try:
        doc = Document(io.BytesIO(raw))
    except Exception as e:
        raise ExtractionError(f"Unreadable DOCX: {e}", document_format="docx", cause=e) from e
    return "\n".join([p.text for p in doc.paragraphs])


def read_pdf(raw: bytes) -> str:
    try:
        return pdf_extract(io.BytesIO(raw)) or ""
    except Exception as e:
        logger.debug(f"pdfminer failed ({e}), trying unstructured")
    try:
        # fallback to unstructured
        elems = partition(file=io.BytesIO(raw), content_type=PDF_MIME)
        return "\n".join([e.text for e in elems if hasattr(e, "text") and e.text])
    except Exception as e:
        raise ExtractionError(f"Unreadable PDF: {e}", document_format="pdf", cause=e) from e


HANDLERS: Dict[DocumentFormat, Callable[[bytes], str]] = {
    DocumentFormat.PDF: read_pdf,
    DocumentFormat.DOCX: read_docx,
    DocumentFormat.PLAIN: read_plain,
}


def _is_docx_container(raw: bytes) -> bool:
    # damaged archives raise more than BadZipFile (e.g. NotImplementedError)
    try:
        with zipfile.ZipFile(io.BytesIO(raw)) as zf:
            return "word/document.xml" in zf.namelist()
    except Exception:
        return False


def looks_textual(raw: bytes) -> bool:
    """True when the bytes are strict UTF-8 without NUL or other control bytes."""
    try:
        decoded = raw.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return not any(ord(c) < 32 and c not in "\t\n\r\f" for c in decoded)


def sniff_format(filename: Optional[str], raw: bytes) -> Tuple[DocumentFormat, bool]:
    """
    Pick a handler for a document.

    Content is checked first, then the filename. The second element tells
    whether the choice came from the content itself.
    """
    if raw[:5] == b"%PDF-":
        return DocumentFormat.PDF, True
    if raw[:4] == b"PK\x03\x04" and _is_docx_container(raw):
        return DocumentFormat.DOCX, True

    name = (filename or "").lower()
    guessed, _ = mimetypes.guess_type(name)
    if name.endswith(".pdf") or guessed == PDF_MIME:
        return DocumentFormat.PDF, False
    if name.endswith(".docx") or guessed == DOCX_MIME:
        return DocumentFormat.DOCX, False
    return DocumentFormat.PLAIN, False


def extract_document(filename: Optional[str], raw: Optional[bytes]) -> ExtractionResult:
    raw = raw or b""
    fmt, from_content = DocumentFormat.PLAIN, False

    try:
        fmt, from_content = sniff_format(filename, raw)
        return ExtractionResult(format=fmt, text=HANDLERS[fmt](raw))
    except ExtractionError as e:
        logger.warning(f"Could not extract {fmt.value} text from {filename!r}: {e.message}")
        failed = ExtractionResult(format=fmt, ok=False, error=e.message)
    except Exception as e:
        logger.warning(f"Unexpected {fmt.value} extraction failure for {filename!r}: {e}")
        failed = ExtractionResult(format=fmt, ok=False, error=str(e))

    # Only the extension pointed at a binary format and the bytes are really text
    if not from_content and fmt != DocumentFormat.PLAIN and looks_textual(raw):
        return ExtractionResult(format=DocumentFormat.PLAIN, text=read_plain(raw))
    return failed


def extract_text(filename: Optional[str], raw: Optional[bytes]) -> str:
    """Plain text of a document, or "" when nothing could be extracted."""
    return extract_document(filename, raw).text
