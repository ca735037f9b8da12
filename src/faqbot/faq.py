"""
FAQ corpus and answer selection.

The BM25 engine only knows question texts and their positions. This module
owns the answers: it loads question/answer pairs from YAML, builds the
engine over the questions and turns the top-ranked position back into a
reply using a fixed relevance threshold.

YAML layout:
    entries:
      - question: "How do I reset my password?"
        answer: "Click 'Forgot Password' on the login page."
    keywords:             # optional, used by KeywordMatcher
      - keyword: "report bug"
        answer: "Please create a GitHub issue"
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

import yaml

from .bm25 import RankingEngine

logger = logging.getLogger(__name__)

DEFAULT_FAQ_PATH = Path(__file__).parent / "data" / "faq.yaml"

DEFAULT_THRESHOLD = 5.0

ANSWER_TEMPLATE = "{answer} (score: {score:.3f})"
NO_ANSWER_TEMPLATE = "Sorry, no answer found! (score: {score:.3f})"
NO_ANSWER_TEXT = "Sorry, no answer found!"
# Nothing was ranked at all (empty FAQ)
NO_MATCH_TEXT = "Sorry, no answer found! (score: 0)"


class FaqCorpusError(ValueError):
    """FAQ file is missing, unparsable or has the wrong shape"""


@dataclass(frozen=True)
class FaqEntry:
    question: str
    answer: str


@dataclass(frozen=True)
class KeywordRule:
    keyword: str    # lowercase
    answer: str


@dataclass(frozen=True)
class FaqCorpus:
    """Ordered FAQ entries plus keyword rules. Entry order is the BM25 index."""
    entries: Tuple[FaqEntry, ...]
    keywords: Tuple[KeywordRule, ...] = ()

    @property
    def questions(self) -> List[str]:
        return [entry.question for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


def _parse_pairs(items, key: str, section: str, source: str) -> List[Tuple[str, str]]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise FaqCorpusError(f"{source}: '{section}' must be a list, got {type(items).__name__}")

    pairs = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise FaqCorpusError(f"{source}: {section}[{position}] must be a mapping")
        value = item.get(key)
        answer = item.get("answer")
        if not isinstance(value, str) or not value.strip():
            raise FaqCorpusError(f"{source}: {section}[{position}] has no '{key}'")
        if not isinstance(answer, str) or not answer.strip():
            raise FaqCorpusError(f"{source}: {section}[{position}] has no 'answer'")
        pairs.append((value, answer))
    return pairs


def parse_faq_corpus(data, source: str = "<data>") -> FaqCorpus:
    """
    Validate already-parsed YAML/JSON data and build a FaqCorpus.

    Raises:
        FaqCorpusError: If the structure does not match the expected layout
    """
    if not isinstance(data, dict):
        raise FaqCorpusError(f"{source}: expected a mapping with 'entries', got {type(data).__name__}")
    if "entries" not in data:
        raise FaqCorpusError(f"{source}: missing 'entries' section")

    entries = tuple(
        FaqEntry(question=q, answer=a)
        for q, a in _parse_pairs(data["entries"], "question", "entries", source)
    )
    keywords = tuple(
        KeywordRule(keyword=k.lower(), answer=a)
        for k, a in _parse_pairs(data.get("keywords"), "keyword", "keywords", source)
    )
    return FaqCorpus(entries=entries, keywords=keywords)


def load_faq_corpus(path: Optional[Union[str, Path]] = None) -> FaqCorpus:
    """
    Load a FAQ corpus from YAML.

    Args:
        path: YAML file; defaults to the packaged FAQ set

    Returns:
        FaqCorpus with entries in file order

    Raises:
        FaqCorpusError: If the file cannot be read, parsed or validated
    """
    faq_path = Path(path) if path else DEFAULT_FAQ_PATH

    try:
        text = faq_path.read_text(encoding="utf-8")
    except OSError as e:
        raise FaqCorpusError(f"Cannot read FAQ file {faq_path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FaqCorpusError(f"Invalid YAML in {faq_path}: {e}") from e

    corpus = parse_faq_corpus(data, source=str(faq_path))
    logger.info(f"Loaded FAQ corpus: {len(corpus.entries)} entries, {len(corpus.keywords)} keyword rules from {faq_path}")
    return corpus


@dataclass(frozen=True)
class FaqReply:
    """Outcome of answering one query"""
    query: str
    answered: bool
    rankable: bool                  # False = query had no usable tokens
    score: float                    # Top BM25 score (0.0 if not rankable)
    text: str                       # Message to send back
    index: Optional[int] = None     # Matched entry (only when answered)
    question: Optional[str] = None
    answer: Optional[str] = None


@dataclass
class FaqResponder:
    """
    Threshold policy on top of RankingEngine.

    A top score at or above the threshold selects that entry's answer.
    Anything else (low score, empty corpus, query without tokens) gets the
    "no answer" reply.
    """
    corpus: FaqCorpus
    threshold: float = DEFAULT_THRESHOLD
    include_score: bool = True
    engine: RankingEngine = field(init=False, repr=False)

    def __post_init__(self):
        self.engine = RankingEngine(self.corpus.questions)

    def _format(self, template: str, plain: str, **values) -> str:
        if self.include_score:
            return template.format(**values)
        return plain

    def _no_answer(self, query: str, rankable: bool, score: float) -> FaqReply:
        return FaqReply(
            query=query,
            answered=False,
            rankable=rankable,
            score=score,
            text=self._format(NO_ANSWER_TEMPLATE, NO_ANSWER_TEXT, score=score),
        )

    def answer(self, query: str) -> FaqReply:
        """Select the best FAQ answer for a query, or the no-answer reply."""
        # The degenerate fallback must never pick entry 0, even with threshold <= 0
        if not self.engine.is_rankable(query):
            logger.debug(f"Query has no rankable tokens: {query!r}")
            return self._no_answer(query, rankable=False, score=0.0)

        ranked = self.engine.score(query)
        if not ranked:
            return FaqReply(
                query=query,
                answered=False,
                rankable=True,
                score=0.0,
                text=self._format(NO_MATCH_TEXT, NO_ANSWER_TEXT),
            )

        top = ranked[0]
        if top.score >= self.threshold:
            entry = self.corpus.entries[top.index]
            return FaqReply(
                query=query,
                answered=True,
                rankable=True,
                score=top.score,
                text=self._format(ANSWER_TEMPLATE, entry.answer, answer=entry.answer, score=top.score),
                index=top.index,
                question=entry.question,
                answer=entry.answer,
            )

        return self._no_answer(query, rankable=True, score=top.score)

