from __future__ import annotations
import logging
import math
from typing import List, Sequence
from .datatypes import Graph, Node, Sentence

logger = logging.getLogger(__name__)

def _check_sorted(words: Sequence[str]) -> None:
    for k in range(1, len(words)):
        if words[k - 1] >= words[k]:
            raise ValueError(f"word list must be sorted and unique, got {words[k - 1]!r} before {words[k]!r}")

def count_overlap(a: Sequence[str], b: Sequence[str]) -> int:
    """Number of shared words between two sorted, de-duplicated word lists."""
    _check_sorted(a)
    _check_sorted(b)
    i = j = overlap = 0
    while i < len(a) and j < len(b):
        if a[i] < b[j]:
            i += 1
        elif a[i] > b[j]:
            j += 1
        else:
            overlap += 1
            i += 1
            j += 1
    return overlap

def sentence_similarity(a: Sequence[str], b: Sequence[str]) -> float:
    """
    Lexical overlap normalised by sentence length:

        sim(a, b) = |a ∩ b| / (ln|a| + ln|b|)

    A sentence with fewer than two unique words makes the denominator zero or
    undefined, so the similarity is 0.0 in that case.
    """
    if len(a) <= 1 or len(b) <= 1:
        return 0.0
    return count_overlap(a, b) / (math.log(len(a)) + math.log(len(b)))

def build_graph(sentences: List[Sentence]) -> Graph:
    n = len(sentences)
    graph = Graph(nodes=[Node(idx=i) for i in range(n)])
    for i in range(n):
        for j in range(i+1, n):
            w = sentence_similarity(sentences[i].words, sentences[j].words)
            graph.nodes[i].neighbors[j] = w
            graph.nodes[j].neighbors[i] = w

    # weights never change after this point, so the sums are cached once
    for node in graph.nodes:
        node.total_weight = sum(node.neighbors.values())

    logger.debug("Built graph with %d nodes, %d non-zero edges",
                 n, sum(1 for _, _, w in graph.edges() if w > 0))
    return graph

def similarity_matrix(graph: Graph) -> List[List[float]]:
    n = len(graph)
    M = [[0.0]*n for _ in range(n)]
    for i, j, w in graph.edges():
        M[i][j] = M[j][i] = w
    return M
