from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Union
from .datatypes import Document, RankConfig
from .preprocessing import Segmenter, SegmentationError, build_sentences, load_lemma_dict, segment
from .graphing import build_graph
from .scoring import rank_sentences, ranked_indices

logger = logging.getLogger(__name__)

def _check_fraction(fraction: float) -> None:
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"fraction must be within [0, 1], got {fraction}")

def _resolve_lemmas(lemma_dict: Optional[Mapping[str, str]], cfg: RankConfig) -> Optional[Mapping[str, str]]:
    if lemma_dict is not None:
        return lemma_dict
    if cfg.lemma_path is None:
        return None
    try:
        return load_lemma_dict(cfg.lemma_path)
    except OSError as e:
        logger.warning("Lemma list %s unavailable, continuing without lemmatization: %s", cfg.lemma_path, e)
        return None

def new_document(text: Union[str, bytes],
                 lemma_dict: Optional[Mapping[str, str]] = None,
                 config: Optional[RankConfig] = None,
                 segmenter: Optional[Segmenter] = None) -> Document:
    """
    Segment, normalise, build the similarity graph and rank, all exactly once.
    The returned document can then be summarised at any number of fractions.
    """
    cfg = config or RankConfig()
    lemmas = _resolve_lemmas(lemma_dict, cfg)
    spans = segment(text, segmenter)
    sentences = build_sentences(spans, lemmas)
    graph = build_graph(sentences)
    iterations, converged = rank_sentences(sentences, graph, cfg)

    raw = text.decode("utf-8") if isinstance(text, bytes) else text
    doc = Document(raw_text=raw, sentences=sentences, graph=graph, config=cfg,
                   iterations=iterations, converged=converged)
    logger.debug("Ranked %d sentences (%d words) in %d iterations, converged=%s",
                 len(sentences), doc.total_word_count, iterations, converged)
    return doc

def word_budget(doc: Document, fraction: float) -> int:
    return max(1, int(round(fraction * doc.total_word_count)))

def select_sentences(doc: Document, fraction: float) -> List[int]:
    """Indices of the summary sentences, in document order."""
    _check_fraction(fraction)
    n = len(doc.sentences)
    if n == 0:
        return []

    ranked = ranked_indices(doc.sentences)
    if doc.config.budget == "sentences":
        k = max(1, int(round(n * fraction)))
        selected = ranked[:k]
    else:
        budget = word_budget(doc, fraction)
        selected = []
        used = 0
        for i in ranked:
            wc = doc.sentences[i].word_count
            if selected and used + wc > budget:
                break
            selected.append(i)
            used += wc
            if used >= budget:
                break
    selected.sort()  # restore original order
    return selected

def generate_summary(doc: Document, fraction: float) -> str:
    return " ".join(doc.sentences[i].text for i in select_sentences(doc, fraction))

def summarize(text: Union[str, bytes],
              fraction: float = 0.1,
              lemma_dict: Optional[Mapping[str, str]] = None,
              config: Optional[RankConfig] = None,
              segmenter: Optional[Segmenter] = None) -> str:
    # Pipeline glue
    _check_fraction(fraction)
    doc = new_document(text, lemma_dict=lemma_dict, config=config, segmenter=segmenter)
    return generate_summary(doc, fraction)

def summarize_many(texts: Iterable[Union[str, bytes]],
                   fraction: float = 0.1,
                   lemma_dict: Optional[Mapping[str, str]] = None,
                   config: Optional[RankConfig] = None,
                   segmenter: Optional[Segmenter] = None,
                   max_workers: Optional[int] = None) -> List[Optional[str]]:
    """
    Summarise independent texts concurrently.

    Each text gets its own Document; the only shared state is the lemma
    mapping, which is handed out read-only. A text that fails segmentation
    yields ``None`` at its position and the error is logged.
    """
    _check_fraction(fraction)
    cfg = config or RankConfig()
    lemmas = _resolve_lemmas(lemma_dict, cfg)
    if lemmas is not None and not isinstance(lemmas, MappingProxyType):
        lemmas = MappingProxyType(dict(lemmas))

    def _one(text):
        try:
            return summarize(text, fraction, lemma_dict=lemmas, config=cfg, segmenter=segmenter)
        except SegmentationError as e:
            logger.error("Skipping document: %s", e)
            return None

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(_one, texts))

def log_graph(doc: Document) -> None:
    for node in doc.graph.nodes:
        logger.debug("Node number %d with score: %f", node.idx, doc.sentences[node.idx].score)
