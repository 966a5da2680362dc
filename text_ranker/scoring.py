from __future__ import annotations
import logging
from typing import List, Tuple
from .datatypes import Graph, RankConfig, Sentence

logger = logging.getLogger(__name__)

def rank_sentences(sentences: List[Sentence], graph: Graph, config: RankConfig) -> Tuple[int, bool]:
    """
    Weighted TextRank over the sentence graph.

    Score formula for sentence i:

        S(i) = (1 - d) + d × Σ_j [ w(i,j) / W(j) ] × S(j)

    where W(j) is the cached total weight of node j. Nodes with W(j) == 0 pass
    nothing on but still receive the (1 - d) baseline. Every sweep reads the
    previous score vector only; new scores are committed after the sweep.

    Args:
        sentences: Sentences whose ``score`` is updated in place
        graph: Similarity graph, node i matching sentences[i]
        config: Damping factor, convergence threshold and iteration cap

    Returns:
        Tuple of (iterations run, converged)
    """
    d = config.damping_factor
    for s in sentences:
        s.score = 1.0
    if not sentences:
        return 0, True

    iterations = 0
    converged = False
    while iterations < config.max_iterations:
        iterations += 1
        old = [s.score for s in sentences]
        new_scores = []
        for node in graph.nodes:
            raw = 0.0
            for j, w in node.neighbors.items():
                total = graph.nodes[j].total_weight
                if total == 0:
                    continue
                raw += w / total * old[j]
            new_scores.append(raw * d + (1 - d))

        max_delta = max(abs(o - n) for o, n in zip(old, new_scores))
        for s, score in zip(sentences, new_scores):
            s.score = score

        logger.debug("Iteration %d: max delta %.6f", iterations, max_delta)
        if max_delta <= config.threshold:
            converged = True
            break

    if not converged:
        logger.debug("Ranking stopped after %d iterations without converging", iterations)
    return iterations, converged

def ranked_indices(sentences: List[Sentence]) -> List[int]:
    """Sentence indices by score descending; equal scores keep document order."""
    return sorted(range(len(sentences)), key=lambda i: (-sentences[i].score, i))
