"""
Keyword FAQ matching.

Simpler alternative to BM25: a question gets the answer of the first keyword
it contains (case-insensitive substring), in rule order.
"""

from typing import Iterable, Optional

from .faq import KeywordRule

FALLBACK_ANSWER = "Oops! I don't have an answer for that yet."


def is_question(text: Optional[str]) -> bool:
    """A message is a question if it ends with '?' (ignoring surrounding whitespace)."""
    return bool(text) and text.strip().endswith("?")


class KeywordMatcher:
    """First-match keyword lookup"""

    def __init__(self, rules: Iterable[KeywordRule], fallback: str = FALLBACK_ANSWER):
        self.rules = tuple(rules)
        self.fallback = fallback

    def find_best_answer(self, question: str) -> str:
        question = question.lower()
        for rule in self.rules:
            if rule.keyword in question:
                return rule.answer
        return self.fallback

    def match(self, text: Optional[str]) -> Optional[str]:
        """Answer for a question, None for anything that is not a question."""
        if not is_question(text):
            return None
        return self.find_best_answer(text)
