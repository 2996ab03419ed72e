"""Text cleaning and chunking for ingestion.

Chunks come from langchain's recursive character splitter: try the coarsest
separator first (paragraphs), fall back to lines, then words, then raw
characters, and merge the pieces back into chunks of at most ``chunk_size``
characters with ``chunk_overlap`` characters carried over between chunks.
"""

import unicodedata

from langchain_text_splitters import RecursiveCharacterTextSplitter


def clean_text(text: str) -> str:
    """Normalize raw document text.

    Applies NFKC normalization, strips every line and collapses runs of
    blank lines into one.
    """
    if not text or not text.strip():
        return ""
    text = unicodedata.normalize("NFKC", text)
    result: list[str] = []
    for line in (line.strip() for line in text.splitlines()):
        if line == "" and (not result or result[-1] == ""):
            continue
        result.append(line)
    return "\n".join(result).strip()


def split_text(text: str, chunk_size: int = 1000, chunk_overlap: int = 200) -> list[str]:
    """Split text into overlapping chunks.

    Args:
        text: The text to split
        chunk_size: Maximum chunk length in characters
        chunk_overlap: Characters shared between consecutive chunks

    Returns:
        List of non-empty chunks, in document order
    """
    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be smaller than chunk_size")
    if not text or not text.strip():
        return []
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
    )
    return splitter.split_text(text)
