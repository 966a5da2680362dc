from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

BUDGET_MODES = ("words", "sentences")

@dataclass
class Sentence:
    idx: int
    text: str          # whitespace-collapsed original, used for output
    normalized: str = ""
    words: List[str] = field(default_factory=list)  # unique, sorted
    word_count: int = 0
    score: float = 1.0

@dataclass
class Node:
    idx: int
    neighbors: Dict[int, float] = field(default_factory=dict)  # neighbor idx -> weight
    total_weight: float = 0.0

@dataclass
class Graph:
    nodes: List[Node] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def weight(self, i: int, j: int) -> float:
        return self.nodes[i].neighbors.get(j, 0.0)

    def edges(self) -> Iterator[Tuple[int, int, float]]:
        """Yield each undirected edge once as (i, j, weight) with i < j."""
        for node in self.nodes:
            for j, w in sorted(node.neighbors.items()):
                if node.idx < j:
                    yield node.idx, j, w

@dataclass
class RankConfig:
    damping_factor: float = 0.85
    threshold: float = 0.0001
    max_iterations: int = 30
    budget: str = "words"  # "words" | "sentences"
    lemma_path: Optional[str] = None

    def __post_init__(self):
        if not 0.0 < self.damping_factor < 1.0:
            raise ValueError(f"damping_factor must be in (0, 1), got {self.damping_factor}")
        if self.threshold < 0:
            raise ValueError(f"threshold must be >= 0, got {self.threshold}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.budget not in BUDGET_MODES:
            raise ValueError(f"Unknown budget mode: {self.budget}")

@dataclass
class Document:
    raw_text: str
    sentences: List[Sentence]
    graph: Graph
    config: RankConfig = field(default_factory=RankConfig)
    iterations: int = 0
    converged: bool = False
    total_word_count: int = field(init=False, default=0)

    def __post_init__(self):
        self.total_word_count = sum(s.word_count for s in self.sentences)

    @property
    def scores(self) -> List[float]:
        return [s.score for s in self.sentences]
