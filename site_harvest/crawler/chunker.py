"""Word-count based text chunking."""
from __future__ import annotations

from typing import List

DEFAULT_CHUNK_SIZE = 800


def chunk_text(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[str]:
    """Split *text* into consecutive groups of *chunk_size* words.

    Words are separated by any whitespace run and re-joined with single spaces.
    The trailing partial group is kept; chunks never overlap.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    words = (text or "").split()
    return [" ".join(words[i : i + chunk_size]) for i in range(0, len(words), chunk_size)]
