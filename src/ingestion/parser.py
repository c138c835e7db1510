"""Document text extraction for PDF and plain text uploads."""

import logging
from pathlib import Path

import chardet

from src.errors import InvalidInputError
from src.models.parsed import ParsedDocument

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format identifiers
SUPPORTED_FORMATS: dict[str, str] = {
    ".pdf": "pdf",
    ".txt": "txt",
    ".md": "txt",
}


class DocumentParser:
    """Extracts raw text from uploaded documents.

    Args:
        allowed_extensions: Extensions accepted by this parser. Defaults to
            every supported format.
        max_bytes: Largest accepted payload, or None for no limit.
    """

    def __init__(
        self,
        allowed_extensions: list[str] | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self._allowed = [ext.lower() for ext in (allowed_extensions or SUPPORTED_FORMATS)]
        self._max_bytes = max_bytes

    def parse(self, file_path: str | Path) -> ParsedDocument:
        """Parse a document on disk.

        Args:
            file_path: Path to the document.

        Returns:
            A ParsedDocument containing the extracted text.

        Raises:
            FileNotFoundError: If file_path does not exist.
            InvalidInputError: If the file is unsupported, too large, or unreadable.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return self.parse_bytes(path.read_bytes(), path.name)

    def parse_bytes(self, data: bytes, filename: str) -> ParsedDocument:
        """Parse an uploaded document held in memory.

        Args:
            data: The raw file contents.
            filename: Original file name, used to detect the format.

        Returns:
            A ParsedDocument containing the extracted text.

        Raises:
            InvalidInputError: If the upload is empty, unsupported, too large,
                or cannot be decoded.
        """
        if not data:
            raise InvalidInputError("No file uploaded")

        file_format = self._detect_format(filename)

        if self._max_bytes is not None and len(data) > self._max_bytes:
            limit_mb = self._max_bytes / (1024 * 1024)
            raise InvalidInputError(f"File too large. Please upload a file smaller than {limit_mb:.0f}MB.")

        if file_format == "pdf":
            raw_text, page_count = self._parse_pdf(data, filename)
        else:
            raw_text, page_count = self._parse_txt(data, filename), 1

        logger.info(
            "Extracted %d characters from %s (%d pages)", len(raw_text), filename, page_count
        )
        return ParsedDocument(
            filename=filename,
            raw_text=raw_text,
            page_count=page_count,
            file_format=file_format,
        )

    def _detect_format(self, filename: str) -> str:
        """Determine file format from extension.

        Args:
            filename: Name of the uploaded file.

        Returns:
            Format string ("pdf", "txt").

        Raises:
            InvalidInputError: If extension is not supported or not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in SUPPORTED_FORMATS or ext not in self._allowed:
            raise InvalidInputError(
                f"Unsupported file format: '{ext}'. Supported: {', '.join(self._allowed)}"
            )
        return SUPPORTED_FORMATS[ext]

    def _parse_pdf(self, data: bytes, filename: str) -> tuple[str, int]:
        """Extract text from PDF bytes using pymupdf (fitz).

        Args:
            data: PDF file contents.
            filename: Name used in log messages.

        Returns:
            Extracted text with pages separated by newlines, and the page count.

        Raises:
            InvalidInputError: If the PDF cannot be opened.
        """
        import fitz  # type: ignore[import-untyped]

        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                pages = []
                page_count = 0
                for page in doc:
                    page_count += 1
                    text = page.get_text("text")
                    if text.strip():
                        pages.append(text)
                return "\n".join(pages), page_count
        except Exception as exc:
            logger.exception("Failed to parse PDF: %s", filename)
            raise InvalidInputError(
                "Failed to extract text from PDF. Please ensure the file is a valid PDF."
            ) from exc

    def _parse_txt(self, data: bytes, filename: str) -> str:
        """Decode a plain text upload with encoding detection.

        Tries UTF-8 first, then uses chardet for fallback detection.

        Args:
            data: Raw file contents.
            filename: Name used in log messages.

        Returns:
            The decoded text.
        """
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            pass

        detected = chardet.detect(data)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence", 0)

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                filename,
                encoding,
                confidence * 100,
            )

        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.error("Failed to decode file: %s", filename)
            return data.decode("utf-8", errors="replace")
