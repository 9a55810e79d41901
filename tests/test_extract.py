import sys
import unittest
from io import BytesIO
from pathlib import Path

from docx import Document

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_analyzer.core.errors import ExtractionError  # noqa: E402
from resume_analyzer.parsing import extract_text, is_supported_file_format  # noqa: E402


class ExtractTextTests(unittest.TestCase):
    def test_plain_text_is_decoded_and_stripped(self):
        text = extract_text("  Jane Doe\nPython engineer  \n".encode("utf-8"), "resume.TXT")
        self.assertEqual(text, "Jane Doe\nPython engineer")

    def test_docx_paragraphs_are_joined(self):
        document = Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("")
        document.add_paragraph("Skills: Python, Docker")
        buffer = BytesIO()
        document.save(buffer)
        text = extract_text(buffer.getvalue(), "resume.docx")
        self.assertEqual(text, "Jane Doe\nSkills: Python, Docker")

    def test_unsupported_extension(self):
        with self.assertRaises(ExtractionError) as ctx:
            extract_text(b"data", "resume.rtf")
        self.assertEqual(ctx.exception.code, "unsupported_format")

    def test_empty_bytes(self):
        with self.assertRaises(ExtractionError) as ctx:
            extract_text(b"", "resume.pdf")
        self.assertEqual(ctx.exception.code, "empty_document")

    def test_corrupt_documents_raise(self):
        for name in ("resume.pdf", "resume.docx"):
            with self.subTest(name=name):
                with self.assertRaises(ExtractionError) as ctx:
                    extract_text(b"this is not a real document", name)
                self.assertEqual(ctx.exception.code, "extraction_failed")

    def test_supported_formats(self):
        self.assertTrue(is_supported_file_format("cv.pdf"))
        self.assertTrue(is_supported_file_format("cv.DOCX"))
        self.assertFalse(is_supported_file_format("cv.doc"))
        self.assertFalse(is_supported_file_format(""))


if __name__ == "__main__":
    unittest.main()
