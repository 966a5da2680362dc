from __future__ import annotations
import logging
import re
from types import MappingProxyType
from typing import Callable, Iterable, List, Mapping, Optional, Tuple, Union
from .datatypes import Sentence

logger = logging.getLogger(__name__)

# Characters removed before comparison
PUNCTUATION = frozenset(".?!,;:-[]{}()'\"")
_PUNCT_TABLE = str.maketrans("", "", "".join(PUNCTUATION))

_SPACE_RE = re.compile(r"\s+")

Segmenter = Callable[[str], Iterable[str]]


class SegmentationError(ValueError):
    """Raised when the text cannot be split into sentences."""


def split_sentences(text: str) -> List[str]:
    # Split on . ! ? while keeping order; naive but serviceable
    parts = re.split(r"(?<=[.!?])\s+", text.strip())
    parts = [p.strip() for p in parts if p.strip()]
    return parts

def segment(text: Union[str, bytes], segmenter: Optional[Segmenter] = None) -> List[str]:
    """
    Run sentence segmentation and return the ordered sentence spans.

    ``bytes`` input is decoded as UTF-8. Decoding problems and any error raised
    by a custom ``segmenter`` surface as ``SegmentationError``.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SegmentationError(f"Input is not valid UTF-8: {e}") from e
    if not isinstance(text, str):
        raise SegmentationError(f"Expected text, got {type(text).__name__}")

    segmenter = segmenter or split_sentences
    try:
        return list(segmenter(text))
    except SegmentationError:
        raise
    except Exception as e:
        raise SegmentationError(f"Sentence segmentation failed: {e}") from e

def clean_text(text: str) -> str:
    """Collapse tabs, newlines and repeated spaces into single spaces."""
    return _SPACE_RE.sub(" ", text).strip()

def normalize_sentence(text: str, lemma_dict: Optional[Mapping[str, str]] = None) -> str:
    normalized = text.translate(_PUNCT_TABLE).lower()
    if lemma_dict is not None:
        normalized = " ".join(lemma_dict.get(tok, tok) for tok in normalized.split())
    return normalized

def tokenize_words(normalized: str) -> Tuple[List[str], int]:
    """
    Return (sorted unique words, total word count).

    Splits on runs of whitespace; empty tokens are never produced, so leading,
    trailing or doubled spaces do not count as words.
    """
    toks = normalized.split()
    return sorted(set(toks)), len(toks)

def build_sentences(spans: Iterable[str], lemma_dict: Optional[Mapping[str, str]] = None) -> List[Sentence]:
    sentences: List[Sentence] = []
    for span in spans:
        text = clean_text(span)
        if not text:
            continue
        normalized = normalize_sentence(text, lemma_dict)
        words, count = tokenize_words(normalized)
        sentences.append(Sentence(idx=len(sentences), text=text, normalized=normalized,
                                  words=words, word_count=count))
    return sentences

def parse_lemma_lines(lines: Iterable[str]) -> Mapping[str, str]:
    """
    Parse ``lemma<TAB>token`` lines into a read-only token -> lemma mapping.
    """
    lemmas = {}
    for lineno, line in enumerate(lines, 1):
        line = line.rstrip("\r\n")
        if not line:
            continue
        lemma, sep, token = line.partition("\t")
        if not sep:
            logger.debug("Skipping lemma line %d without a tab: %r", lineno, line)
            continue
        lemmas[token] = lemma
    return MappingProxyType(lemmas)

def load_lemma_dict(path: str) -> Mapping[str, str]:
    with open(path, encoding="utf-8") as fh:
        lemmas = parse_lemma_lines(fh)
    logger.debug("Loaded %d lemmas from %s", len(lemmas), path)
    return lemmas
