def test_login_me_logout_cycle(app):
    client = app.test_client()

    assert client.get("/api/auth/me").status_code == 401

    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret1", "rememberMe": True})
    assert resp.status_code == 200
    assert resp.get_json() == {"user": {"id": "u1", "email": "alice@example.com", "name": "Alice"}}

    me = client.get("/api/auth/me")
    assert me.get_json()["user"]["id"] == "u1"

    assert client.post("/api/auth/logout").get_json() == {"success": True}
    assert client.get("/api/auth/me").status_code == 401


def test_bad_credentials_return_401(app):
    resp = app.test_client().post("/api/auth/login", json={"email": "alice@example.com", "password": "bad"})

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid email or password"}


def test_login_validates_body(app):
    resp = app.test_client().post("/api/auth/login", json={"email": ""})

    assert resp.status_code == 400
    assert set(resp.get_json()["details"]) == {"email", "password"}
