from app import create_app


def test_home_lists_plugins():
    app = create_app("TestingConfig")
    client = app.test_client()
    response = client.get("/")
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["title"] == "Scientific Calculator Server"
    titles = [item["title"] for item in data["plugins"]]
    assert titles == ["Scientific Calculator"]
    assert data["plugins"][0]["api_prefix"] == "/api/scientific_calculator"
    assert response.headers.get("Content-Security-Policy")
    assert response.headers.get("X-Request-ID")


def test_request_id_is_propagated():
    client = create_app("TestingConfig").test_client()
    response = client.get("/", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.get_json()["request_id"] == "abc123"


def test_unknown_route_returns_json_error():
    client = create_app("TestingConfig").test_client()
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "not_found"


def test_wrong_method_returns_json_error():
    client = create_app("TestingConfig").test_client()
    response = client.get("/api/scientific_calculator/evaluate")
    assert response.status_code == 405
    assert response.get_json()["error"]["code"] == "method_not_allowed"


def test_oversized_payload_is_rejected():
    app = create_app("TestingConfig")
    client = app.test_client()
    body = "1+" * (app.config["MAX_CONTENT_LENGTH"] // 2 + 10) + "1"
    response = client.post("/api/scientific_calculator/evaluate", json={"expression": body})
    assert response.status_code == 413
    assert response.get_json()["error"]["code"] == "payload_too_large"


def test_config_override_path(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yml"
    config_file.write_text(
        "site:\n  title: Lab Calculator\nplugins:\n  scientific_calculator:\n    default_mode: metric\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CALC_SERVER_CONFIG", str(config_file))
    client = create_app("TestingConfig").test_client()
    assert client.get("/").get_json()["data"]["title"] == "Lab Calculator"
    session = client.post("/api/scientific_calculator/sessions", json={}).get_json()["data"]["session"]
    assert session["mode"] == "metric"
