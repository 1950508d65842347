"""
Document Extractor - Normalize submitted files into scorer content.

Supports:
- Word Documents (.docx): extracted paragraph and table text
- Plain Text (.txt, .md): UTF-8 text
- PDF (.pdf): base64 binary, or extracted text when pdf_text_extraction is on
- Images (.png, .jpg, .jpeg, .webp, .gif): base64 binary with their mime type

Anything else is sent as base64 binary with its detected (or default) mime type.
"""
import asyncio
import base64
import io
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from docx import Document as DocxDocument
from pypdf import PdfReader

from core.exceptions import ExtractionError
from pipeline.models import Document

logger = logging.getLogger(__name__)

TEXT_MIME_TYPE = "text/plain"


@dataclass(frozen=True)
class ExtractedContent:
    """Scorer-ready content of one document.

    Attributes:
        content: Decoded text, or base64-encoded bytes when is_plain_text is False
        mime_type: Mime type describing content
        is_plain_text: Whether content is decoded text
    """
    content: str
    mime_type: str
    is_plain_text: bool


class DocumentExtractor:
    """Extract scorer content from documents.

    Extraction never mutates the document and gives the same output for the
    same document. Parsing runs in a worker thread so agents keep interleaving.
    """

    TEXT_FORMATS = {'.txt', '.md'}
    IMAGE_FORMATS = {'.png', '.jpg', '.jpeg', '.webp', '.gif'}
    SUPPORTED_FORMATS = {'.docx', '.pdf'} | TEXT_FORMATS | IMAGE_FORMATS

    def __init__(self, pdf_text_extraction: bool = False, default_mime_type: str = "application/pdf"):
        self.pdf_text_extraction = pdf_text_extraction
        self.default_mime_type = default_mime_type

    async def extract(self, document: Document) -> ExtractedContent:
        """Extract content from a document.

        Raises:
            ExtractionError: If the document is empty, corrupt or undecodable
        """
        return await asyncio.to_thread(self.extract_sync, document)

    def extract_sync(self, document: Document) -> ExtractedContent:
        if not document.data:
            raise ExtractionError(f"Empty document: {document.name}")

        ext = Path(document.name).suffix.lower()

        if ext == '.docx':
            return self._extract_docx(document)
        if ext in self.TEXT_FORMATS:
            return self._extract_text(document)
        if ext == '.pdf' and self.pdf_text_extraction:
            return self._extract_pdf_text(document)
        return self._encode_binary(document)

    def is_supported(self, file_name: str) -> bool:
        return Path(file_name).suffix.lower() in self.SUPPORTED_FORMATS

    def resolve_mime_type(self, document: Document) -> str:
        """Mime type from the document, then its extension, then the default."""
        if document.mime_type:
            return document.mime_type
        guessed, _ = mimetypes.guess_type(document.name)
        return guessed or self.default_mime_type

    def _encode_binary(self, document: Document) -> ExtractedContent:
        return ExtractedContent(
            content=base64.b64encode(document.data).decode('ascii'),
            mime_type=self.resolve_mime_type(document),
            is_plain_text=False,
        )

    def _extract_text(self, document: Document) -> ExtractedContent:
        try:
            text = document.data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ExtractionError(
                f"File encoding issue in {document.name}: {e}. Ensure file is UTF-8 encoded."
            ) from e

        if not text.strip():
            raise ExtractionError(f"Empty document: {document.name}")

        return ExtractedContent(content=text, mime_type=TEXT_MIME_TYPE, is_plain_text=True)

    def _extract_docx(self, document: Document) -> ExtractedContent:
        """Extract text from all paragraphs and tables of a Word document."""
        try:
            doc = DocxDocument(io.BytesIO(document.data))
            paragraphs = [para.text.strip() for para in doc.paragraphs if para.text.strip()]

            # Tables are common in resumes
            for table in doc.tables:
                for row in table.rows:
                    row_texts = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                    if row_texts:
                        paragraphs.append(' '.join(row_texts))
        except Exception as e:
            raise ExtractionError(f"Failed to parse DOCX file {document.name}: {e}") from e

        text = '\n\n'.join(paragraphs)
        if not text.strip():
            raise ExtractionError(f"No text found in DOCX file {document.name}")

        logger.debug(f"Extracted {len(text)} chars from DOCX {document.name}")
        return ExtractedContent(content=text, mime_type=TEXT_MIME_TYPE, is_plain_text=True)

    def _extract_pdf_text(self, document: Document) -> ExtractedContent:
        """Extract text from all pages of a PDF."""
        try:
            reader = PdfReader(io.BytesIO(document.data))
            pages = list(reader.pages)
        except Exception as e:
            raise ExtractionError(f"Failed to parse PDF file {document.name}: {e}") from e

        if not pages:
            raise ExtractionError(f"PDF file has no pages: {document.name}")

        pages_text = []
        for i, page in enumerate(pages):
            try:
                page_text = page.extract_text()
            except Exception as e:
                logger.warning(f"Failed to extract text from page {i + 1} of {document.name}: {e}")
                continue
            if page_text and page_text.strip():
                pages_text.append(page_text.strip())

        text = '\n\n'.join(pages_text)
        if not text.strip():
            raise ExtractionError(
                f"No text extracted from PDF {document.name}. "
                f"The PDF may be scanned images; disable pdf_text_extraction to send it as a file."
            )

        return ExtractedContent(content=text, mime_type=TEXT_MIME_TYPE, is_plain_text=True)
