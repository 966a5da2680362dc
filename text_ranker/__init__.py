from .datatypes import Sentence, Node, Graph, Document, RankConfig
from .preprocessing import (SegmentationError, split_sentences, segment, normalize_sentence,
                            tokenize_words, build_sentences, load_lemma_dict)
from .graphing import count_overlap, sentence_similarity, build_graph, similarity_matrix
from .scoring import rank_sentences, ranked_indices
from .summarize import (new_document, word_budget, select_sentences, generate_summary,
                        summarize, summarize_many, log_graph)
