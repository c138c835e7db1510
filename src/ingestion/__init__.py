"""Document ingestion: text extraction and chunking."""

from src.ingestion.chunker import chunk_text, count_words, normalize_whitespace, split_sentences
from src.ingestion.parser import DocumentParser

__all__ = [
    "DocumentParser",
    "chunk_text",
    "count_words",
    "normalize_whitespace",
    "split_sentences",
]
