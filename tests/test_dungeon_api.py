import pytest

from burrow import __version__

QUERY = "seed=11&width=60&height=30"


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.get_json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert "alternate" in data["split_directions"]


def test_snapshot_basic(client):
    r = client.get(f"/api/dungeon?{QUERY}")
    assert r.status_code == 200
    data = r.get_json()
    assert data["seed"] == 11
    assert data["config"]["width"] == 60 and data["config"]["height"] == 30
    assert data["nodes"][0]["bounds"] == [0, 0, 60, 30]
    for key in ("leaves", "rooms", "paths", "metrics"):
        assert key in data


def test_snapshot_is_deterministic(client):
    first = client.get(f"/api/dungeon?{QUERY}").get_json()
    second = client.get(f"/api/dungeon?{QUERY}").get_json()
    assert first["nodes"] == second["nodes"]
    assert first["paths"] == second["paths"]


def test_snapshot_without_cache(test_app):
    test_app.config["BURROW_DISABLE_CACHE"] = True
    client = test_app.test_client()
    a = client.get(f"/api/dungeon?{QUERY}").get_json()
    b = client.get(f"/api/dungeon?{QUERY}").get_json()
    assert a["nodes"] == b["nodes"]


def test_app_config_supplies_defaults(test_app):
    test_app.config["BURROW_SPLITS"] = 0
    r = test_app.test_client().get("/api/dungeon?seed=4")
    data = r.get_json()
    assert data["config"]["splits"] == 0
    assert len(data["nodes"]) == 1


def test_ascii_endpoint(client):
    r = client.get(f"/api/dungeon/ascii?{QUERY}")
    assert r.status_code == 200
    assert r.mimetype == "text/plain"
    assert r.headers["X-Dungeon-Seed"] == "11"
    lines = r.get_data(as_text=True).splitlines()
    assert len(lines) == 30
    assert all(len(line) == 60 for line in lines)


def test_ascii_without_paths(client):
    text = client.get(f"/api/dungeon/ascii?{QUERY}&paths=0").get_data(as_text=True)
    assert "#" not in text


@pytest.mark.parametrize(
    "query",
    [
        "width=abc",
        "direction=sideways",
        "center=middle",
        "width=0",
        "splits=-2",
        "width=2000000000&height=2000000000&splits=0",
        "splits=40",
    ],
)
def test_bad_query_is_400(client, query):
    r = client.get(f"/api/dungeon?{query}")
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_outline_endpoint(client):
    data = client.get(f"/api/dungeon/outline?{QUERY}").get_json()
    assert data["seed"] == 11
    assert data["lines"][0] == "#0 (0, 0, 60, 30)"


def test_subtree_endpoint(client):
    r = client.get(f"/api/dungeon/subtree/0?{QUERY}&side=right")
    assert r.status_code == 200
    data = r.get_json()
    assert data["side"] == "right" and data["node"] == 0
    assert data["nodes"][0]["id"] == 0
    ids = [n["id"] for n in data["nodes"]]
    assert ids == list(range(len(ids)))


def test_subtree_bad_side(client):
    r = client.get(f"/api/dungeon/subtree/0?{QUERY}&side=up")
    assert r.status_code == 400


def test_subtree_missing_node(client):
    r = client.get(f"/api/dungeon/subtree/999?{QUERY}")
    assert r.status_code == 404


def test_subtree_of_leaf_is_404(client):
    leaf = client.get(f"/api/dungeon?{QUERY}").get_json()["leaves"][0]
    r = client.get(f"/api/dungeon/subtree/{leaf}?{QUERY}")
    assert r.status_code == 404
    assert "no left child" in r.get_json()["error"]


def test_generation_value_error_is_500(test_app, monkeypatch):
    from burrow.routes import dungeon_api

    def broken(config):
        raise ValueError("bug inside generation")

    monkeypatch.setattr(dungeon_api, "Dungeon", broken)
    test_app.config["BURROW_DISABLE_CACHE"] = True
    test_app.config["PROPAGATE_EXCEPTIONS"] = False
    r = test_app.test_client().get("/api/dungeon?seed=5")
    assert r.status_code == 500
    assert "error_id" in r.get_json()


def test_app_config_sequence_insets(test_app):
    test_app.config["BURROW_INSETS"] = (1, 1, 1, 1)
    r = test_app.test_client().get("/api/dungeon?seed=6")
    assert r.status_code == 200
    assert r.get_json()["config"]["insets"] == [1, 1, 1, 1]
