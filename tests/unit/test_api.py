"""
Unit tests for the FastAPI endpoints (in-process, no server).
"""

import pytest
from fastapi.testclient import TestClient

from faqbot import main
from faqbot.main import app

pytestmark = pytest.mark.unit


@pytest.fixture
def client(monkeypatch):
    """Client over the packaged FAQ set with default threshold"""
    monkeypatch.delenv("FAQ_CORPUS_PATH", raising=False)
    monkeypatch.delenv("FAQ_SCORE_THRESHOLD", raising=False)
    monkeypatch.delenv("FAQ_REPLY_WITH_SCORE", raising=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_client(monkeypatch, faq_yaml_file):
    """Client over the 3-entry sample FAQ with threshold 1.0"""
    monkeypatch.setenv("FAQ_CORPUS_PATH", str(faq_yaml_file))
    monkeypatch.setenv("FAQ_SCORE_THRESHOLD", "1.0")
    monkeypatch.delenv("FAQ_REPLY_WITH_SCORE", raising=False)
    with TestClient(app) as test_client:
        yield test_client


class TestServiceEndpoints:
    """Test root and health"""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "faqbot API"
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["faq_entries"] == 14
        assert data["threshold"] == 5.0
        assert data["uptime_seconds"] >= 0

    def test_engine_built_at_startup(self, client):
        assert main.responder is not None
        assert len(main.responder.engine) == 14


class TestScoreEndpoint:
    """Test /v1/faq/score"""

    def test_ranked_results(self, sample_client):
        response = sample_client.post("/v1/faq/score", json={"query": "reset password"})

        assert response.status_code == 200
        data = response.json()
        assert data["rankable"] is True
        assert data["total"] == 3
        assert [item["index"] for item in data["results"]] == [0, 1, 2]
        assert data["results"][0]["score"] > 0
        assert data["results"][0]["question"] == "How do I reset my password?"
        assert data["results"][1]["score"] == 0.0

    def test_top_k(self, sample_client):
        response = sample_client.post("/v1/faq/score", json={"query": "snap release", "top_k": 1})

        data = response.json()
        assert data["total"] == 1
        assert data["results"][0]["index"] == 2

    def test_unrankable_query(self, sample_client):
        """Test zero-token query returns the placeholder flagged as not rankable"""
        response = sample_client.post("/v1/faq/score", json={"query": "the a an"})

        data = response.json()
        assert data["rankable"] is False
        assert data["results"] == [{"index": 0, "score": 0.0, "question": None}]

    def test_invalid_top_k(self, sample_client):
        response = sample_client.post("/v1/faq/score", json={"query": "snap", "top_k": 0})
        assert response.status_code == 422

    def test_missing_query(self, sample_client):
        response = sample_client.post("/v1/faq/score", json={})
        assert response.status_code == 422


class TestAnswerEndpoint:
    """Test /v1/faq/answer"""

    def test_answered(self, client):
        response = client.post("/v1/faq/answer", json={"query": "How do I reset my password?"})

        assert response.status_code == 200
        data = response.json()
        assert data["answered"] is True
        assert data["index"] == 3
        assert data["score"] >= 5.0
        assert data["text"].startswith("To reset your password")
        assert data["text"].endswith(f"(score: {data['score']:.3f})")

    def test_not_answered(self, client):
        response = client.post("/v1/faq/answer", json={"query": "Where is the cafeteria?"})

        data = response.json()
        assert data["answered"] is False
        assert data["index"] is None
        assert data["text"] == "Sorry, no answer found! (score: 0.000)"

    def test_custom_threshold(self, sample_client):
        """Test FAQ_SCORE_THRESHOLD is applied at startup"""
        response = sample_client.post("/v1/faq/answer", json={"query": "reset password"})

        data = response.json()
        assert data["answered"] is True
        assert data["answer"] == "Click 'Forgot Password' on the login page."

    def test_reply_without_score(self, monkeypatch, faq_yaml_file):
        monkeypatch.setenv("FAQ_CORPUS_PATH", str(faq_yaml_file))
        monkeypatch.setenv("FAQ_SCORE_THRESHOLD", "1.0")
        monkeypatch.setenv("FAQ_REPLY_WITH_SCORE", "false")

        with TestClient(app) as test_client:
            data = test_client.post("/v1/faq/answer", json={"query": "reset password"}).json()

        assert data["text"] == "Click 'Forgot Password' on the login page."


class TestKeywordEndpoint:
    """Test /v1/faq/keyword"""

    def test_keyword_question(self, client):
        response = client.post("/v1/faq/keyword", json={"text": "Where can I report bug?"})

        data = response.json()
        assert data["is_question"] is True
        assert data["answer"] == "Please create a GitHub issue"

    def test_unknown_question(self, client):
        data = client.post("/v1/faq/keyword", json={"text": "Is it lunch time?"}).json()
        assert data["answer"] == "Oops! I don't have an answer for that yet."

    def test_statement_not_answered(self, client):
        data = client.post("/v1/faq/keyword", json={"text": "report bug"}).json()

        assert data["is_question"] is False
        assert data["answer"] is None


class TestStartupErrors:
    """Test lifespan failures"""

    def test_bad_corpus_path_fails_startup(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FAQ_CORPUS_PATH", str(tmp_path / "missing.yaml"))

        with pytest.raises(ValueError, match="Cannot read FAQ file"):
            with TestClient(app):
                pass
