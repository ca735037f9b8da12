"""
BM25 index builder - corpus-wide statistics for FAQ ranking.

Builds everything the scorer needs in a single pass over the corpus:
- term frequencies per document
- document lengths (token counts, duplicates included)
- document frequencies (documents containing a term at least once)
- smoothed IDF per term
- average document length

The builder is mutable and lives only during construction. ``build()``
freezes the result into a read-only ``CorpusIndex``.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Tuple

from .tokenizer import tokenize

logger = logging.getLogger(__name__)


def smoothed_idf(total_docs: int, doc_freq: int) -> float:
    """
    IDF with +1 inside the log (never negative).

    idf(t) = ln((N - df(t) + 0.5) / (df(t) + 0.5) + 1)

    Unlike the classic Robertson-Sparck Jones form, a term present in every
    document still gets a small positive weight.
    """
    return math.log((total_docs - doc_freq + 0.5) / (doc_freq + 0.5) + 1)


@dataclass(frozen=True)
class CorpusIndex:
    """Read-only BM25 statistics for one corpus."""
    documents: Tuple[str, ...]
    term_frequencies: Tuple[Mapping[str, int], ...]
    doc_lengths: Tuple[int, ...]
    doc_freq: Mapping[str, int]
    idf: Mapping[str, float]
    avg_doc_length: float

    @property
    def total_docs(self) -> int:
        return len(self.documents)


class IndexBuilder:
    """Accumulates term statistics document by document."""

    def __init__(self):
        self.documents: List[str] = []
        self.term_frequencies: List[Dict[str, int]] = []
        self.doc_lengths: List[int] = []
        self.doc_freq: Dict[str, int] = defaultdict(int)

    def add_document(self, text: str) -> None:
        tokens = tokenize(text)

        term_freq = defaultdict(int)
        for token in tokens:
            term_freq[token] += 1

        # Each distinct term counts once per document
        for term in term_freq:
            self.doc_freq[term] += 1

        self.documents.append(text)
        self.term_frequencies.append(dict(term_freq))
        self.doc_lengths.append(len(tokens))

    def build(self) -> CorpusIndex:
        """Freeze accumulated statistics and compute IDF + average length."""
        total_docs = len(self.documents)

        # Empty corpus (or one with no surviving tokens) keeps the
        # normalization denominator well-defined
        avg_doc_length = (sum(self.doc_lengths) / total_docs) if total_docs else 0.0
        if not avg_doc_length:
            avg_doc_length = 1.0

        idf = {
            term: smoothed_idf(total_docs, df)
            for term, df in self.doc_freq.items()
        }

        index = CorpusIndex(
            documents=tuple(self.documents),
            term_frequencies=tuple(MappingProxyType(dict(tf)) for tf in self.term_frequencies),
            doc_lengths=tuple(self.doc_lengths),
            doc_freq=MappingProxyType(dict(self.doc_freq)),
            idf=MappingProxyType(idf),
            avg_doc_length=avg_doc_length,
        )

        logger.debug(
            f"Built BM25 index: {total_docs} docs, {len(idf)} unique terms, "
            f"avgdl={avg_doc_length:.2f}"
        )

        return index


def build_corpus_index(documents: Sequence[str]) -> CorpusIndex:
    """
    Build a frozen BM25 index for an ordered corpus.

    Args:
        documents: Document strings; position i is document index i

    Returns:
        CorpusIndex with all statistics computed once

    Example:
        >>> index = build_corpus_index(["How do I reset my password?", "Reset the router"])
        >>> index.doc_freq["reset"]
        2
        >>> index.doc_lengths
        (2, 2)
    """
    builder = IndexBuilder()
    for text in documents:
        builder.add_document(text)
    return builder.build()
