import pytest


def test_health(client):
    for path in ("/", "/health"):
        r = client.get(path)
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "healthy"
        assert body["modelLoaded"] is True
        assert "aiStats" in body and "psychologyStats" in body


@pytest.mark.parametrize("difficulty", ["Easy", "Medium", "Hard"])
def test_generate_quiz(client, difficulty):
    r = client.post("/api/quiz/generate", json={"category": "Science", "difficulty": difficulty, "playerName": "Ada"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["aiGenerated"] is True
    assert body["generationTimeUnit"] == "milliseconds"

    question = body["question"]
    assert len(question["answers"]) == 3
    assert question["correctAnswerIndex"] in (0, 1, 2)
    assert question["difficulty"] == difficulty
    assert "correctAnswerPriceMultiplier" in question


def test_generate_quiz_defaults_without_body(client):
    r = client.post("/api/quiz/generate")
    assert r.status_code == 200
    assert r.json()["question"]["category"] == "Science"


def test_generate_quiz_fallback_counts_failure(fallback_client):
    r = fallback_client.post("/api/quiz/generate", json={"category": "Engineering"})
    assert r.status_code == 200
    body = r.json()
    assert body["aiGenerated"] is False
    assert body["aiModel"] == "Fallback"
    assert len(body["question"]["answers"]) == 3

    stats = fallback_client.get("/api/stats").json()
    assert stats["server"]["failedGenerations"] == 1
    assert stats["server"]["successfulGenerations"] == 0


def test_categories(client):
    body = client.get("/api/quiz/categories").json()
    assert list(body["categories"]) == ["Science", "Technology", "Mathematics", "Engineering"]
    assert body["difficulties"] == ["Easy", "Medium", "Hard"]
    assert body["modelLoaded"] is True


@pytest.mark.parametrize("path", ["/api/psychology/generate", "/api/psychology/questions"])
def test_psychology_questions(client, path):
    r = client.post(path, json={"count": 4})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 4
    assert [q["id"] for q in body["questions"]] == [1, 2, 3, 4]
    assert body["questions"][0]["aiModel"] == "Psychology-Model"
    assert len(body["questions"][0]["options"]) == 3


@pytest.mark.parametrize("count", [0, 17])
def test_psychology_count_out_of_range(client, count):
    r = client.post("/api/psychology/generate", json={"count": count})
    assert r.status_code == 422
    assert r.json()["error"]["type"] == "validation_error"


def test_analyze(client):
    answers = [{"questionId": i, "selectedOption": 2, "trait": "E/I"} for i in range(1, 9)]
    r = client.post("/api/psychology/analyze", json={"answers": answers})
    assert r.status_code == 200
    body = r.json()
    assert body["personalityType"] == "INFP"
    assert body["title"] == "The Mediator"
    assert abs(body["scores"]["E"] + body["scores"]["I"] - 1.0) < 1e-9
    assert 0.0 <= body["confidence"] <= 1.0
    assert len(body["growthAreas"]) == 3


@pytest.mark.parametrize("payload", [
    {"answers": []},
    {},
    {"answers": [{"questionId": 1, "selectedOption": 3}]},
])
def test_analyze_rejects_invalid_input(client, payload):
    r = client.post("/api/psychology/analyze", json=payload)
    assert r.status_code == 422
    assert r.json()["error"]["message"] == "Validation error"


def test_traits(client):
    body = client.get("/api/psychology/traits").json()
    assert body["traits"] == [
        "Extroversion/Introversion", "Sensing/Intuition", "Thinking/Feeling", "Judging/Perceiving",
    ]
    assert len(body["types"]) == 16


def test_stats_and_request_counter(client):
    client.post("/api/quiz/generate", json={})
    body = client.get("/api/stats").json()

    assert body["server"]["totalRequests"] == 2
    assert body["server"]["successfulGenerations"] == 1
    assert body["ai"]["totalGenerated"] == 1
    assert body["ai"]["modelMemoryUsage"] == 3000
    assert body["psychology"]["totalAnalyses"] == 0


def test_model_info(client):
    body = client.get("/api/model/info").json()
    assert body["modelLoaded"] is True
    assert body["modelInfo"].startswith("Multi-Model Architecture:")
    assert len(body["loadedModels"]) == 3


def test_model_config_clamps(client):
    r = client.put("/api/model/config", json={"temperature": 5.0, "maxTokens": 1})
    assert r.status_code == 200
    assert r.json() == {"success": True, "temperature": 1.5, "maxTokens": 32, "contextSize": 1024}


def test_model_reload(client):
    r = client.post("/api/model/reload")
    assert r.status_code == 200
    assert r.json()["success"] is True
    assert r.json()["modelLoaded"] is True


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json()["error"]["type"] == "http_error"
