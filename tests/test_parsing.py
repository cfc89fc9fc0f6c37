import io
import zipfile
import pytest
from unittest.mock import patch
from docx import Document

from app.helpers.parsing import extract_document, extract_text, sniff_format, looks_textual
from app.models.models import DocumentFormat


@pytest.fixture
def docx_bytes():
    doc = Document()
    doc.add_paragraph("Senior Python engineer")
    doc.add_paragraph("Bachelor of Engineering")
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


@pytest.fixture
def bad_version_docx(docx_bytes):
    """DOCX whose central directory claims an unsupported zip version"""
    raw = bytearray(docx_bytes)
    idx = raw.find(b"PK\x01\x02")
    raw[idx + 6] = 90
    return bytes(raw)


class TestFormatSniffing:
    """Test cases for choosing an extraction handler"""

    def test_pdf_magic_wins_over_extension(self):
        assert sniff_format("resume.txt", b"%PDF-1.7\n...") == (DocumentFormat.PDF, True)

    def test_docx_container_detected_from_content(self, docx_bytes):
        assert sniff_format("upload.bin", docx_bytes) == (DocumentFormat.DOCX, True)

    def test_extension_fallback(self):
        assert sniff_format("resume.pdf", b"plain words") == (DocumentFormat.PDF, False)
        assert sniff_format("resume.DOCX", b"not a zip") == (DocumentFormat.DOCX, False)

    def test_plain_default(self):
        assert sniff_format("notes.txt", b"hello") == (DocumentFormat.PLAIN, False)
        assert sniff_format(None, b"") == (DocumentFormat.PLAIN, False)

    def test_zip_that_is_not_docx(self):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("readme.txt", "hi")
        assert sniff_format("archive.zip", buf.getvalue()) == (DocumentFormat.PLAIN, False)


class TestExtraction:
    """Test cases for best-effort text extraction"""

    def test_plain_utf8(self):
        assert extract_text("cv.txt", "Résumé: Python".encode("utf-8")) == "Résumé: Python"

    def test_invalid_utf8_bytes_are_dropped(self):
        assert extract_text("cv.txt", b"\xff\xfehi") == "hi"

    def test_empty_input(self):
        assert extract_text(None, None) == ""
        assert extract_text("cv.txt", b"") == ""

    def test_docx_paragraphs(self, docx_bytes):
        result = extract_document("cv.docx", docx_bytes)
        assert result.ok
        assert result.format == DocumentFormat.DOCX
        assert "Senior Python engineer" in result.text
        assert "Bachelor of Engineering" in result.text

    @patch('app.helpers.parsing.partition')
    @patch('app.helpers.parsing.pdf_extract')
    def test_pdf_uses_pdfminer(self, mock_pdf_extract, mock_partition):
        mock_pdf_extract.return_value = "Extracted PDF text"
        assert extract_text("cv.pdf", b"%PDF-1.4 fake") == "Extracted PDF text"
        mock_partition.assert_not_called()

    @patch('app.helpers.parsing.partition')
    @patch('app.helpers.parsing.pdf_extract')
    def test_pdf_falls_back_to_unstructured(self, mock_pdf_extract, mock_partition):
        class Element:
            def __init__(self, text):
                self.text = text

        mock_pdf_extract.side_effect = Exception("pdfminer failed")
        mock_partition.return_value = [Element("Line one"), Element(""), Element("Line two")]
        assert extract_text("cv.pdf", b"%PDF-1.4 fake") == "Line one\nLine two"

    @patch('app.helpers.parsing.partition')
    @patch('app.helpers.parsing.pdf_extract')
    def test_corrupted_pdf_yields_failed_result(self, mock_pdf_extract, mock_partition):
        """A corrupted PDF never raises; it produces an explicit failure"""
        mock_pdf_extract.side_effect = Exception("pdfminer failed")
        mock_partition.side_effect = Exception("unstructured failed")

        result = extract_document("broken.pdf", b"%PDF-1.4\n\x00\x01garbage")

        assert result.ok is False
        assert result.format == DocumentFormat.PDF
        assert result.text == ""
        assert "unstructured failed" in result.error

    @patch('app.helpers.parsing.partition')
    @patch('app.helpers.parsing.pdf_extract')
    def test_misnamed_text_file_falls_back_to_plain(self, mock_pdf_extract, mock_partition):
        """Only the extension said PDF, so the bytes are decoded as text"""
        mock_pdf_extract.side_effect = Exception("not a pdf")
        mock_partition.side_effect = Exception("not a pdf")

        result = extract_document("resume.pdf", b"Plain text resume")

        assert result.ok
        assert result.format == DocumentFormat.PLAIN
        assert result.text == "Plain text resume"

    def test_misnamed_docx_falls_back_to_plain(self):
        result = extract_document("resume.docx", b"Plain text resume")
        assert result.format == DocumentFormat.PLAIN
        assert result.text == "Plain text resume"

    @patch('app.helpers.parsing.partition')
    @patch('app.helpers.parsing.pdf_extract')
    def test_binary_named_pdf_is_not_decoded_as_text(self, mock_pdf_extract, mock_partition):
        """Only the extension said PDF, but the bytes are binary: no fallback"""
        mock_pdf_extract.side_effect = Exception("no /Root object")
        mock_partition.side_effect = Exception("not a pdf")

        result = extract_document("scan.pdf", bytes(range(256)) * 8)
        assert not result.ok
        assert result.text == ""


class TestDamagedDocuments:
    """Real damaged files, no mocks: extraction yields empty text and never raises"""

    def test_truncated_docx(self, docx_bytes):
        truncated = docx_bytes[:len(docx_bytes) // 2]
        assert sniff_format("cv.docx", truncated) == (DocumentFormat.DOCX, False)
        assert extract_text("cv.docx", truncated) == ""

    def test_unsupported_zip_version(self, bad_version_docx):
        assert sniff_format("cv.docx", bad_version_docx) == (DocumentFormat.DOCX, False)
        result = extract_document("cv.docx", bad_version_docx)
        assert not result.ok
        assert result.text == ""

    def test_binary_pdf_without_magic(self):
        assert extract_text("scan.pdf", bytes(range(256)) * 8) == ""


class TestLooksTextual:
    """Test cases for the plain-text fallback guard"""

    def test_text(self):
        assert looks_textual("Résumé\n\tPython\r\n".encode("utf-8"))

    def test_control_bytes(self):
        assert not looks_textual(b"PK\x03\x04abc")
        assert not looks_textual(b"abc\x00def")

    def test_invalid_utf8(self):
        assert not looks_textual(b"\xff\xfeabc")
