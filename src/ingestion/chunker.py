"""Word-count text chunking and sentence splitting."""

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse every run of whitespace to a single space and trim.

    Args:
        text: Raw extracted text.

    Returns:
        The normalized text.
    """
    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(text: str) -> int:
    """Count whitespace-separated words in a text string.

    Args:
        text: The text to count.

    Returns:
        Number of words.
    """
    return len(text.split())


def chunk_text(text: str, size: int) -> list[str]:
    """Split text into ordered runs of at most ``size`` words.

    Words are separated on any whitespace and rejoined with single
    spaces, so joining the result with " " reproduces the
    whitespace-normalized input. The last chunk may be shorter.

    Args:
        text: The text to split.
        size: Maximum number of words per chunk.

    Returns:
        At least one chunk. When the text has no words the raw input is
        returned as the only chunk.

    Raises:
        ValueError: If size is not positive.
    """
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")

    words = text.split()
    chunks = [" ".join(words[i : i + size]) for i in range(0, len(words), size)]

    return chunks or [text]


def split_sentences(text: str, min_chars: int = 20) -> list[str]:
    """Split text on periods, keeping trimmed fragments longer than ``min_chars``.

    Args:
        text: The text to split.
        min_chars: Fragments of this many characters or fewer are dropped.

    Returns:
        Sentence fragments in source order, without the trailing period.
    """
    sentences = []
    for fragment in text.split("."):
        stripped = fragment.strip()
        if len(stripped) > min_chars:
            sentences.append(stripped)
    return sentences
