"""
BM25 (Best Match 25) ranking for FAQ matching.

This module ranks a fixed corpus of short texts (FAQ questions) against a
free-text query.

Components:
- tokenizer: Lowercasing, punctuation stripping and stopword filtering
- index_builder: Term/document frequencies, IDF and average length (built once)
- engine: RankingEngine with BM25 scoring and stable ordering

Key properties:
- Corpus is fixed at construction (no incremental updates)
- Smoothed IDF, so weights are never negative
- Deterministic output: ties keep corpus order
"""

from .tokenizer import tokenize, STOPWORDS
from .index_builder import CorpusIndex, build_corpus_index, smoothed_idf
from .engine import RankingEngine, ScoredResult, DEGENERATE_RESULT

__all__ = [
    "tokenize",
    "STOPWORDS",
    "CorpusIndex",
    "build_corpus_index",
    "smoothed_idf",
    "RankingEngine",
    "ScoredResult",
    "DEGENERATE_RESULT",
]
