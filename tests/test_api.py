"""
Tests for the Flask API
"""

import io
import json
import pytest

from chatbond.api import app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr("chatbond.config.USE_WORKER", False)
    monkeypatch.setattr("chatbond.config.USE_ENRICHMENT", False)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def test_health(client):
    response = client.get("/api/health")
    data = response.get_json()

    assert response.status_code == 200
    assert data["status"] in ("ok", "degraded")
    assert "enrichment" in data["config"]


def test_analyze_json_content(client, scenario_text):
    response = client.post("/api/analyze", json={"content": scenario_text, "format": "plain"})
    data = response.get_json()

    assert response.status_code == 200
    assert data["metadata"]["participants"] == ["Alice", "Bob"]
    assert data["gamification"]["compatibility"]["score"] == 59


def test_analyze_upload(client, scenario_text):
    response = client.post(
        "/api/analyze",
        data={"file": (io.BytesIO(scenario_text.encode("utf-8")), "chat.txt")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    assert response.get_json()["metadata"]["total_messages"] == 120


def test_analyze_structured_messages(client):
    messages = [
        {"sender": "Alice", "text": "haha great", "timestamp": "2024-01-02T10:00:00"},
        {"sender": "Bob", "text": "thank you!", "timestamp": "2024-01-02T10:02:00"},
    ]
    response = client.post("/api/analyze", json={"messages": messages})
    data = response.get_json()

    assert response.status_code == 200
    assert data["metadata"]["source_format"] == "json"


def test_analyze_missing_content(client):
    response = client.post("/api/analyze", json={})
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_analyze_unparseable(client):
    response = client.post("/api/analyze", json={"content": "hello\nworld"})
    assert response.status_code == 400
    assert "No valid messages" in response.get_json()["error"]


def test_analyze_bad_format(client):
    response = client.post("/api/analyze", data=json.dumps({"content": "x", "format": "telegram"}),
                           content_type="application/json")
    assert response.status_code == 400


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
