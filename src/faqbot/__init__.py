"""faqbot - BM25 FAQ matching with a small FastAPI service."""

from .bm25 import RankingEngine, ScoredResult, tokenize
from .faq import FaqCorpus, FaqEntry, FaqReply, FaqResponder, load_faq_corpus
from .keyword_matcher import KeywordMatcher, is_question

__all__ = [
    "RankingEngine",
    "ScoredResult",
    "tokenize",
    "FaqCorpus",
    "FaqEntry",
    "FaqReply",
    "FaqResponder",
    "load_faq_corpus",
    "KeywordMatcher",
    "is_question",
]
