"""
Tokenizer for BM25 text processing.

Tokenization pipeline (shared by FAQ questions and incoming queries):
1. Lowercase conversion
2. Replace everything except ASCII word characters and apostrophes with spaces
3. Split on whitespace
4. Drop short tokens (2 characters or fewer)
5. Filter stopwords (small question-word list)

No stemming: "passwords" and "password" are different terms.
"""

import re
from typing import List

# Question words and glue words that carry no signal in FAQ questions
STOPWORDS = frozenset([
    'i', 'is', 'my', 'what', 'how', 'do', 'why',
    'the', 'a', 'an', 'to', 'for', 'of', 'and', 'on', 'in', 'at'
])

MIN_TOKEN_LENGTH = 3

_NON_WORD = re.compile(r"[^\w\s']", re.ASCII)


def tokenize(text: str) -> List[str]:
    """
    Tokenize text for BM25 scoring with stopword removal.

    Args:
        text: Input text to tokenize

    Returns:
        List of lowercase tokens in left-to-right order (duplicates kept)

    Examples:
        >>> tokenize("How do I reset my password?")
        ['reset', 'password']

        >>> tokenize("What is the company's address?")
        ["company's", 'address']

        >>> tokenize("the a an")
        []
    """
    if not text:
        return []

    text = _NON_WORD.sub(' ', text.lower())

    return [
        t for t in text.split()
        if len(t) >= MIN_TOKEN_LENGTH and t not in STOPWORDS
    ]
