"""
PDF text extraction for uploaded statements.
"""
import io
import logging
import os
from pathlib import Path
from typing import List, Union

import pdfplumber

from errors import ExtractionError

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024
PDF_SIGNATURE = b'%PDF'


class FileLoader:
    """Extracts per-page text from PDF statements."""

    SUPPORTED_EXTENSIONS = {'.pdf'}

    def __init__(self, max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.max_file_size = max_file_size

    def load_file(self, file_path: Union[str, Path]) -> List[str]:
        """
        Load a PDF statement from disk and return the text of each page.

        Args:
            file_path: Path to the PDF file

        Returns:
            List of page texts, pages without text omitted
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        file_ext = Path(file_path).suffix.lower()
        if file_ext not in self.SUPPORTED_EXTENSIONS:
            raise ExtractionError(f"Unsupported file type: {file_ext or '(none)'}")

        self.logger.info(f"Loading {file_ext} file: {file_path}")
        with open(file_path, 'rb') as f:
            data = f.read()
        return self.extract_pages(data)

    def extract_pages(self, data: bytes) -> List[str]:
        """Extract text from PDF bytes using pdfplumber."""
        if not data:
            raise ExtractionError("Empty file: no PDF content")
        if len(data) > self.max_file_size:
            raise ExtractionError(
                f"File is {len(data)} bytes, larger than the {self.max_file_size} byte limit"
            )
        if not data.lstrip().startswith(PDF_SIGNATURE):
            raise ExtractionError("Not a PDF file")

        pages_text = []
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                for i, page in enumerate(pdf.pages):
                    text = page.extract_text()
                    if text and text.strip():
                        pages_text.append(text)
                        self.logger.debug(f"Extracted text from page {i+1}")
                    else:
                        self.logger.info(f"No text on page {i+1}")
        except Exception as e:
            raise ExtractionError(f"Invalid or corrupted PDF file: {str(e)}") from e

        if not pages_text:
            raise ExtractionError(
                "Could not extract text from this PDF. It may be a scanned image or encrypted."
            )

        self.logger.info(f"Extracted text from {len(pages_text)} pages")
        return pages_text

    def extract_text(self, data: bytes) -> str:
        """Concatenate the page texts of a PDF, one page per block."""
        return '\n'.join(self.extract_pages(data))
