"""Parsed document data model."""

from pydantic import BaseModel


class ParsedDocument(BaseModel):
    """The text extracted from an uploaded document.

    ``raw_text`` is exactly what the extractor produced; whitespace
    normalization happens later in the pipeline.
    """

    filename: str
    raw_text: str
    page_count: int = 0
    file_format: str  # "pdf", "txt"

    @property
    def char_count(self) -> int:
        return len(self.raw_text.strip())
