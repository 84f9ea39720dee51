"""
Text extraction for staged resume documents
"""
from abc import ABC, abstractmethod
from typing import List, Optional

import chardet
import pdfplumber
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import TextExtractionError
from app.models.entities import ProcessedDocument, UploadedDocument
from app.utils.logger import get_logger

logger = get_logger(__name__)


class BaseTextExtractor(ABC):
    """Turns a staged file into plain text"""

    method: str = "base"

    @abstractmethod
    def extract(self, document: UploadedDocument) -> str:
        """Return the document text; may be empty"""


class PDFTextExtractor(BaseTextExtractor):
    """Page-by-page text extraction with pdfplumber"""

    method = "pdfplumber"

    def extract(self, document: UploadedDocument) -> str:
        pages_text = []
        with pdfplumber.open(document.staged_path) as pdf:
            for page_num, page in enumerate(pdf.pages, 1):
                page_text = page.extract_text()
                if page_text:
                    pages_text.append(page_text)

                logger.debug(
                    "pdf_page_processed",
                    filename=document.original_name,
                    page_number=page_num,
                    text_length=len(page_text) if page_text else 0
                )

        return "\n".join(pages_text).strip()


class DecodedTextExtractor(BaseTextExtractor):
    """
    Decodes the raw bytes as text.

    Used when the PDF has no extractable text layer; the model still gets
    whatever readable content the file carries.
    """

    method = "decoded"

    def extract(self, document: UploadedDocument) -> str:
        with open(document.staged_path, "rb") as staged_file:
            raw_data = staged_file.read()

        detected = chardet.detect(raw_data)
        encoding = detected.get("encoding") or "utf-8"

        try:
            text = raw_data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.warning(
                "encoding_fallback",
                filename=document.original_name,
                failed_encoding=encoding
            )
            text = raw_data.decode("utf-8", errors="replace")

        return text.strip()


class DocumentService:
    """Runs extractors in order until one yields text"""

    def __init__(self, extractors: Optional[List[BaseTextExtractor]] = None):
        self.extractors = extractors or [PDFTextExtractor(), DecodedTextExtractor()]

    def _extract(self, document: UploadedDocument) -> ProcessedDocument:
        for extractor in self.extractors:
            try:
                text = extractor.extract(document)
            except Exception as e:
                logger.warning(
                    "text_extractor_failed",
                    filename=document.original_name,
                    extractor=extractor.method,
                    error=str(e),
                    error_type=type(e).__name__
                )
                continue

            if text:
                logger.info(
                    "text_extraction_completed",
                    filename=document.original_name,
                    extractor=extractor.method,
                    text_length=len(text)
                )
                return ProcessedDocument(
                    text=text,
                    file_name=document.original_name,
                    file_size=document.size,
                    processing_method=extractor.method
                )

            logger.info(
                "text_extractor_empty",
                filename=document.original_name,
                extractor=extractor.method
            )

        raise TextExtractionError(
            "No text could be extracted from the document",
            file_name=document.original_name
        )

    async def extract_text(self, document: UploadedDocument) -> ProcessedDocument:
        """
        Extract text from a staged document

        Args:
            document: Staged upload

        Returns:
            ProcessedDocument with the extracted text

        Raises:
            TextExtractionError: If no extractor produced any text
        """
        # pdfplumber is CPU bound and blocking
        return await run_in_threadpool(self._extract, document)
