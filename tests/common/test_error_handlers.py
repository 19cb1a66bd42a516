from src.hr_portal.hr_portal.core.exceptions import StoreError


def _store_down(**kwargs):
    try:
        raise ConnectionError("Lost connection to MySQL server")
    except ConnectionError as e:
        raise StoreError("Database operation failed") from e


def _bug(**kwargs):
    raise RuntimeError("unexpected None")


def test_store_error_hides_details_outside_debug(app, client, salaries_repo, monkeypatch):
    monkeypatch.setattr(salaries_repo, "list", _store_down)
    app.config["DEBUG"] = False

    resp = client.get("/api/salaries")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Database operation failed"}


def test_store_error_includes_cause_in_debug(app, client, salaries_repo, monkeypatch):
    monkeypatch.setattr(salaries_repo, "list", _store_down)
    app.config["DEBUG"] = True

    resp = client.get("/api/salaries")

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["error"] == "Database operation failed"
    assert body["details"] == "Lost connection to MySQL server"


def test_unexpected_error_is_a_bare_500(app, client, salaries_repo, monkeypatch):
    monkeypatch.setattr(salaries_repo, "list", _bug)
    app.config["DEBUG"] = False

    resp = client.get("/api/salaries")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}
