"""Unit test configuration - shared FAQ fixtures"""

import os

import pytest

# Set env vars BEFORE importing faqbot.main
# main.py configures logging at module level (on import)
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from faqbot.faq import FaqCorpus, FaqEntry, KeywordRule


SAMPLE_FAQ_YAML = """
entries:
  - question: "How do I reset my password?"
    answer: "Click 'Forgot Password' on the login page."
  - question: "What is the company's address?"
    answer: "Our address is 123 Main Street, Anytown, USA."
  - question: "When will my snap installation get the latest release?"
    answer: "Snaps are auto-updating."
keywords:
  - keyword: "report bug"
    answer: "Please create a GitHub issue"
  - keyword: "Installation Guide"
    answer: "See README.md for installation steps"
"""


@pytest.fixture
def sample_corpus() -> FaqCorpus:
    """Three FAQ entries plus two keyword rules"""
    return FaqCorpus(
        entries=(
            FaqEntry("How do I reset my password?", "Click 'Forgot Password' on the login page."),
            FaqEntry("What is the company's address?", "Our address is 123 Main Street, Anytown, USA."),
            FaqEntry("When will my snap installation get the latest release?", "Snaps are auto-updating."),
        ),
        keywords=(
            KeywordRule("report bug", "Please create a GitHub issue"),
            KeywordRule("installation guide", "See README.md for installation steps"),
        ),
    )


@pytest.fixture
def faq_yaml_file(tmp_path):
    """SAMPLE_FAQ_YAML written to a temporary file"""
    path = tmp_path / "faq.yaml"
    path.write_text(SAMPLE_FAQ_YAML, encoding="utf-8")
    return path
