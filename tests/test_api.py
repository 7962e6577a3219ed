import uuid

from fastapi.testclient import TestClient

from adventure.main import app
from adventure.leaderboard.routes import top_users
from adventure.submissions.service import StorageError


client = TestClient(app)


def _register(prefix="api"):
    name = f"{prefix}-{uuid.uuid4().hex[:8]}"
    resp = client.post(
        "/api/register",
        json={"username": name, "email": f"{name}@example.com", "password": "password123"},
    )
    assert resp.status_code == 200
    body = resp.json()
    return name, {"Authorization": f"Bearer {body['token']}"}


def _submit(headers, language, level_number, solution):
    return client.post(
        "/api/submit",
        json={"language": language, "levelNumber": level_number, "solution": solution},
        headers=headers,
    )


def test_register_login_profile():
    name, headers = _register()

    resp = client.post("/api/login", json={"username": name, "password": "password123"})
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user.pop("id") > 0
    assert user == {
        "username": name,
        "email": f"{name}@example.com",
        "level": 1,
        "score": 0,
    }

    profile = client.get("/api/profile", headers=headers)
    assert profile.status_code == 200
    assert profile.json()["username"] == name


def test_login_accepts_email():
    name, _ = _register()
    resp = client.post("/api/login", json={"username": f"{name}@example.com", "password": "password123"})
    assert resp.status_code == 200


def test_register_duplicate_rejected():
    name, _ = _register()
    resp = client.post(
        "/api/register",
        json={"username": name, "email": "other@example.com", "password": "x"},
    )
    assert resp.status_code == 400


def test_login_wrong_password():
    name, _ = _register()
    resp = client.post("/api/login", json={"username": name, "password": "nope"})
    assert resp.status_code == 400


def test_submit_requires_auth():
    resp = _submit({}, "html", 1, "<h1>Hello World</h1>")
    assert resp.status_code == 401

    resp = _submit({"Authorization": "Bearer not-a-token"}, "html", 1, "<h1>Hello World</h1>")
    assert resp.status_code == 401


def test_submit_accept_then_resubmit():
    _, headers = _register()

    first = _submit(headers, "html", 1, "<h1>Hello World</h1>")
    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "Level completed!", "points": 10, "nextLevel": 2}

    second = _submit(headers, "html", 1, "<h1>Hello World</h1>")
    assert second.json() == first.json()

    assert client.get("/api/profile", headers=headers).json()["score"] == 10


def test_submit_wrong_answer_returns_hint():
    _, headers = _register()
    resp = _submit(headers, "html", 1, "<h2>Hello World</h2>")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is False
    assert body["hint"] == "Use the h1 tag to create a main heading"
    assert client.get("/api/progress", headers=headers).json() == []


def test_submit_empty_is_400():
    _, headers = _register()
    resp = _submit(headers, "html", 1, "   ")
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_submit_unknown_level_is_404():
    _, headers = _register()
    resp = _submit(headers, "html", 999, "<h1>Hello World</h1>")
    assert resp.status_code == 404
    assert client.get("/api/profile", headers=headers).json()["score"] == 0


def test_submit_huge_level_number_is_404():
    _, headers = _register()
    resp = _submit(headers, "html", 2**70, "<h1>Hello World</h1>")
    assert resp.status_code == 404
    assert client.get("/api/profile", headers=headers).json()["score"] == 0


def test_cookie_token_authenticates():
    name, headers = _register()
    token = headers["Authorization"].split(" ", 1)[1]

    for value in (token, f"Bearer {token}"):
        resp = client.get("/api/profile", headers={"Cookie": f"access_token={value}"})
        assert resp.status_code == 200
        assert resp.json()["username"] == name


def test_submit_storage_error_is_500(monkeypatch):
    _, headers = _register()

    def broken_submit(*args, **kwargs):
        raise StorageError("Could not record submission")

    monkeypatch.setattr("adventure.submissions.routes.submit", broken_submit)
    resp = _submit(headers, "html", 1, "<h1>Hello World</h1>")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Could not save your progress, please try again"


def test_levels_listing_hides_solution():
    resp = client.get("/api/levels/css")
    assert resp.status_code == 200
    levels = resp.json()
    assert [lv["levelNumber"] for lv in levels] == [1, 2]
    assert all("solution" not in lv for lv in levels)
    assert levels[0]["hints"] == "Use the color property to change text color"

    assert client.get("/api/levels/unknown").json() == []


def test_progress_and_summary():
    _, headers = _register()
    _submit(headers, "javascript", 2, 'let name = "Player";')
    _submit(headers, "css", 1, "color: red;")

    progress = client.get("/api/progress", headers=headers).json()
    assert [(p["language"], p["level"]) for p in progress] == [("css", 1), ("javascript", 2)]
    assert all(p["completed"] for p in progress)
    assert progress[1]["score"] == 15

    summary = client.get("/api/progress/summary", headers=headers).json()
    assert summary["score"] == 25
    assert summary["level"] == 3
    assert summary["completed"] == 2
    assert summary["nextLevels"] == {"html": 1, "css": 2, "javascript": 1}


def test_leaderboard_shape_and_limit():
    _, headers = _register()
    _submit(headers, "javascript", 1, 'function greet() {\n  return "Hello!";\n}')

    resp = client.get("/api/leaderboard", params={"limit": 3})
    assert resp.status_code == 200
    rows = resp.json()
    assert 1 <= len(rows) <= 3
    assert [r["rank"] for r in rows] == list(range(1, len(rows) + 1))
    scores = [r["score"] for r in rows]
    assert scores == sorted(scores, reverse=True)

    assert client.get("/api/leaderboard", params={"limit": 0}).status_code == 422


def test_leaderboard_tie_break(db):
    zero_a, _ = _register("zero")
    late, late_headers = _register("tie")
    early, early_headers = _register("tie")
    zero_b, _ = _register("zero")

    # Equal scores: whoever reached the score first wins, regardless of user id
    _submit(early_headers, "css", 1, "color: red;")
    _submit(late_headers, "html", 1, "<h1>Hello World</h1>")

    order = [u.username for u in top_users(db, limit=10_000)]
    assert order.index(early) < order.index(late)
    assert order.index(late) < order.index(zero_a) < order.index(zero_b)


def test_debug_score_consistency():
    _, headers = _register()
    _submit(headers, "html", 1, "<h1>Hello World</h1>")
    _submit(headers, "html", 1, "<h1>Hello World</h1>")

    resp = client.get("/debug/score-consistency")
    assert resp.status_code == 200
    assert resp.json()["all_ok"] is True


def test_debug_db_diagnostics_hides_password():
    resp = client.get("/debug/diagnostics/db")
    assert resp.status_code == 200
    assert resp.json()["backend"] == "sqlite"
