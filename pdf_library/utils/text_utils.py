"""
Text helpers shared by extraction, indexing and the interface.

Cleaning of raw extracted text, display truncation, the hard prefix cut
applied before indexing, and the naive sentence splitter behind summaries.
"""

import re
import unicodedata
from typing import List


HORIZONTAL_SPACE = re.compile(r"[ \t]+")
BLANK_RUN = re.compile(r"\n{3,}")
LINE_BREAKS = re.compile(r"\n+")
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
KEPT_CONTROLS = frozenset("\n\t")


def _printable(char: str) -> bool:
    return char in KEPT_CONTROLS or unicodedata.category(char)[0] != "C"


def clean_text(text: str) -> str:
    """
    Normalize text coming out of a PDF backend.

    NFKC folds ligatures and compatibility forms, control characters other
    than newline and tab are dropped, runs of spaces collapse to one and
    at most one blank line separates paragraphs.
    """
    if not text:
        return ""

    normalized = "".join(filter(_printable, unicodedata.normalize("NFKC", text)))
    lines = (HORIZONTAL_SPACE.sub(" ", line).strip() for line in normalized.split("\n"))
    return BLANK_RUN.sub("\n\n", "\n".join(lines)).strip()


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Shorten text for display, ending it with suffix.

    The cut moves back to the previous space when that loses less than
    a third of the kept text. The result never exceeds max_length.
    """
    if not text or len(text) <= max_length:
        return text

    keep = max_length - len(suffix)
    if keep <= 0:
        return suffix[:max_length]

    head = text[:keep]
    space = head.rfind(" ")
    if space * 10 > keep * 7:
        head = head[:space]

    return f"{head}{suffix}"


def format_score(score: float) -> str:
    """
    Render a relevance score for display.

    Four significant digits, switching to exponent notation for the very
    small scores of terms common to half the library or more.
    """
    return f"{score:.4g}"


def index_prefix(text: str, max_chars: int) -> str:
    """
    Cut text to the part that is allowed into the index.

    A hard character cut, applied before tokenization: a word straddling
    the boundary is indexed only by its leading fragment.

    Args:
        text: Full extracted text.
        max_chars: Maximum number of characters kept.

    Returns:
        The first max_chars characters of text.
    """
    if not text:
        return ""
    return text[:max_chars]


def split_sentences(text: str) -> List[str]:
    """
    Split text into sentences on terminal punctuation.

    Line breaks are flattened first, since PDF extraction breaks
    lines mid-sentence.

    Args:
        text: Text to split.

    Returns:
        Non-empty sentences in document order.
    """
    if not text:
        return []

    flattened = LINE_BREAKS.sub(" ", text)
    return [s for s in SENTENCE_BOUNDARY.split(flattened) if s.strip()]


def summarize_text(text: str, sentence_count: int = 4) -> str:
    """
    Build an extractive summary from the leading sentences.

    Args:
        text: Document text.
        sentence_count: Number of sentences to keep.

    Returns:
        The first sentence_count sentences joined by spaces.
    """
    sentences = split_sentences(text)
    return " ".join(sentences[:max(sentence_count, 0)])


if __name__ == "__main__":
    sample_text = """
    Le premier   paragraphe commence ici. Il continue
    sur une deuxième ligne!   Puis une question ?



    Et une dernière phrase.
    """

    print("=== clean_text ===")
    cleaned = clean_text(sample_text)
    print(repr(cleaned))

    print("\n=== summarize_text ===")
    print(summarize_text(cleaned, 2))

    print("\n=== index_prefix ===")
    print(repr(index_prefix(cleaned, 30)))
