"""
Paragraph-aware text chunker.

Splits lesson content into retrieval-sized passages. Paragraphs are merged
until a chunk nears the target size; paragraphs far above the target are cut
at sentence boundaries, or at a hard offset when no usable boundary exists.

Dependencies: tutor_backend.models.chunk
System role: Chunking stage of lesson indexing
"""

import re

from tutor_backend.models.chunk import TextChunk

PARAGRAPH_BREAK = re.compile(r"\n\n+")
PARAGRAPH_JOINER = "\n\n"
SENTENCE_BREAK = ". "

# A buffer still under min_size may grow past the merge ceiling up to this length.
OVERFLOW_LIMIT = 1500
# Trailing buffers shorter than this are merged into the previous chunk.
TRAILING_MERGE_LIMIT = 300


def _split_oversized(paragraph: str, target_size: int) -> tuple[list[str], str]:
    """
    Cut a paragraph into slices of at most target_size characters.

    Returns:
        tuple: (slices, remainder) where remainder is at most target_size long
    """
    slices: list[str] = []
    remaining = paragraph
    while len(remaining) > target_size:
        # Boundary must leave the slice, period included, within target_size.
        split_index = remaining.rfind(SENTENCE_BREAK, 0, target_size + 1)
        if split_index == -1 or split_index < target_size * 0.5:
            split_index = target_size
        else:
            split_index += 1  # keep the period

        piece = remaining[:split_index].strip()
        if piece:
            slices.append(piece)
        remaining = remaining[split_index:].strip()
    return slices, remaining


def chunk_text(text: str, target_size: int = 1000, min_size: int = 500) -> list[str]:
    """
    Split text into ordered chunks of roughly target_size characters.

    Args:
        text: Raw lesson text
        target_size: Preferred chunk length in characters
        min_size: Length a buffer must reach before it is flushed on overflow

    Returns:
        list[str]: Chunks in source order (empty for blank input)
    """
    if not text or not text.strip():
        return []

    paragraphs = [p.strip() for p in PARAGRAPH_BREAK.split(text)]
    paragraphs = [p for p in paragraphs if p]

    chunks: list[str] = []
    current = ""

    for paragraph in paragraphs:
        if len(paragraph) > target_size * 1.5:
            if current:
                chunks.append(current)
                current = ""
            slices, remainder = _split_oversized(paragraph, target_size)
            chunks.extend(slices)
            current = remainder
            continue

        if len(current) + len(paragraph) <= target_size * 1.2:
            current = f"{current}{PARAGRAPH_JOINER}{paragraph}" if current else paragraph
        elif len(current) >= min_size:
            chunks.append(current)
            current = paragraph
        elif len(current) + len(paragraph) < OVERFLOW_LIMIT:
            current = f"{current}{PARAGRAPH_JOINER}{paragraph}" if current else paragraph
        else:
            chunks.append(current)
            current = paragraph

    if current:
        if chunks and len(current) < TRAILING_MERGE_LIMIT:
            chunks[-1] = f"{chunks[-1]}{PARAGRAPH_JOINER}{current}"
        else:
            chunks.append(current)

    return chunks


class ChunkingEngine:
    """Chunker bound to a fixed target and minimum size."""

    def __init__(self, target_size: int = 1000, min_size: int = 500) -> None:
        if target_size <= 0:
            raise ValueError("target_size must be positive")
        if min_size < 0 or min_size > target_size:
            raise ValueError("min_size must be between 0 and target_size")
        self.target_size = target_size
        self.min_size = min_size

    def chunk(self, text: str) -> list[str]:
        """Split text into chunk strings."""
        return chunk_text(text, self.target_size, self.min_size)

    def chunk_document(self, source_id: str, text: str) -> list[TextChunk]:
        """
        Chunk a single source document.

        Args:
            source_id: Identifier of the source (lesson id)
            text: Source text

        Returns:
            list[TextChunk]: Chunks carrying their source and position
        """
        return [
            TextChunk(source_id=source_id, index=i, text=piece)
            for i, piece in enumerate(self.chunk(text))
        ]
