"""
BM25 ranking engine over a fixed FAQ corpus.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.

Formula:
    score(q, d) = Σ idf(t) × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))

Where:
    tf = term frequency of query token t in document d
    idf = smoothed inverse document frequency (see index_builder.smoothed_idf)
    k1 = term frequency saturation parameter (fixed: 1.0)
    b = length normalization parameter (fixed: 0.75)
    dl = document length (number of tokens)
    avgdl = average document length over the corpus

The engine is built once per corpus and never mutated afterwards, so a single
instance can be shared by concurrent callers without locking.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .index_builder import CorpusIndex, build_corpus_index
from .tokenizer import tokenize

K1 = 1.0
B = 0.75


@dataclass(frozen=True)
class ScoredResult:
    """Relevance of one corpus document for one query"""
    index: int      # Position in the original corpus
    score: float    # BM25 score (0 = no overlapping terms)


# Returned when the query has no tokens left after filtering. It is NOT a
# ranking: callers should check is_rankable() before trusting index 0.
DEGENERATE_RESULT = ScoredResult(index=0, score=0.0)


class RankingEngine:
    """
    BM25 ranking over an ordered corpus of short texts.

    Example:
        >>> engine = RankingEngine(["How do I reset my password?", "What is the company's address?"])
        >>> [(r.index, round(r.score, 3)) for r in engine.score("reset password")]
        [(0, 1.386), (1, 0.0)]
    """

    def __init__(self, corpus: Sequence[str]):
        """
        Args:
            corpus: Document strings. Index positions are the identity used to
                map results back to caller-owned records (e.g. FAQ answers).
        """
        self._index = build_corpus_index(corpus)

    @property
    def index(self) -> CorpusIndex:
        return self._index

    @property
    def corpus(self) -> Tuple[str, ...]:
        return self._index.documents

    def __len__(self) -> int:
        return self._index.total_docs

    def idf(self, term: str) -> float:
        """IDF weight of a (tokenized) term; 0.0 for unseen terms."""
        return self._index.idf.get(term, 0.0)

    def is_rankable(self, query: str) -> bool:
        """True if the query produces at least one token."""
        return bool(tokenize(query))

    def score(self, query: str) -> List[ScoredResult]:
        """
        Score every document against the query.

        Args:
            query: Raw query text

        Returns:
            One ScoredResult per document, highest score first. Equal scores
            keep corpus order. A query without tokens returns
            [DEGENERATE_RESULT], even for an empty corpus.
        """
        query_terms = tokenize(query)
        if not query_terms:
            return [DEGENERATE_RESULT]

        index = self._index
        results = []

        for i, term_freq in enumerate(index.term_frequencies):
            length_norm = 1 - B + B * index.doc_lengths[i] / index.avg_doc_length
            score = 0.0

            for term in query_terms:
                tf = term_freq.get(term, 0)
                idf = index.idf.get(term, 0.0)
                score += idf * ((tf * (K1 + 1)) / (tf + K1 * length_norm))

            results.append(ScoredResult(index=i, score=score))

        # Explicit index key keeps ties in corpus order
        return sorted(results, key=lambda r: (-r.score, r.index))

    def top(self, query: str, k: int = 1) -> List[ScoredResult]:
        """
        First k results of score(query).

        Raises:
            ValueError: If k < 1
        """
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        return self.score(query)[:k]
