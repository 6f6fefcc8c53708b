"""Text processing utilities for pitch transcripts."""

import re
from typing import List, Set


# Common filler words to remove from transcripts
FILLER_WORDS: Set[str] = {
    "um", "uh", "umm", "uhh", "hmm", "mhmm", "euh", "ben", "bah",
    "basically", "actually", "literally", "honestly", "obviously"
}


def normalize_text(text: str, remove_fillers: bool = True) -> str:
    """
    Normalize text for keyword extraction and embedding.

    Args:
        text: Input text to normalize
        remove_fillers: Whether to remove filler words

    Returns:
        Normalized text
    """
    # Convert to lowercase
    text = text.lower()

    # Remove special characters but keep basic punctuation and apostrophes
    text = re.sub(r"[^\w\s.,!?'-]", ' ', text)

    # Normalize whitespace
    text = re.sub(r'\s+', ' ', text).strip()

    if remove_fillers:
        words = text.split()
        words = [w for w in words if w.strip('.,!?') not in FILLER_WORDS]
        text = ' '.join(words)

    return text


def clean_transcript_text(text: str) -> str:
    """
    Clean transcript text by removing common transcript artifacts.

    Args:
        text: Raw transcript text

    Returns:
        Cleaned text
    """
    # Remove timestamps if present [00:00:00]
    text = re.sub(r'\[\d{2}:\d{2}:\d{2}\]', '', text)

    # Remove speaker labels if present (e.g., "Speaker 1:")
    text = re.sub(r'Speaker \d+:', '', text)

    # Remove music/sound descriptions [Music], [Applause]
    text = re.sub(r'\[[A-Za-z\s]+\]', '', text)

    return normalize_text(text, remove_fillers=True)


def split_sentences(text: str, min_length: int = 10) -> List[str]:
    """
    Split text into sentences, dropping fragments shorter than min_length.

    Args:
        text: Input text
        min_length: Minimum sentence length in characters

    Returns:
        List of sentences without their terminal punctuation
    """
    sentences = re.split(r'[.!?]+', text)
    return [s.strip() for s in sentences if len(s.strip()) > min_length]


def extract_sentences(text: str, max_sentences: int = 2) -> str:
    """
    Extract the first N sentences from text.

    Text with no more sentences than requested is returned unchanged.

    Args:
        text: Input text
        max_sentences: Maximum number of sentences to extract

    Returns:
        First N sentences
    """
    sentences = split_sentences(text)
    if len(sentences) <= max_sentences:
        return text.strip()
    return '. '.join(sentences[:max_sentences]) + '.'
