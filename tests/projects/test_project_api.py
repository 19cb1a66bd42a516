def _login(client, user_id, email, name):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["email"] = email
        sess["name"] = name


def test_project_and_task_flow(app, client):
    created = client.post(
        "/api/projects",
        json={"name": "Audit", "startDate": "2025-03-01T00:00:00Z", "managerId": "u1", "teamMembers": ["u2"]},
    )
    assert created.status_code == 201
    project = created.get_json()["data"]
    assert project["status"] == "active"
    assert project["teamMembers"] == ["u2"]

    listing = client.get("/api/projects").get_json()
    assert listing["pagination"]["total"] == 1

    task = client.post(f"/api/projects/{project['id']}/tasks", json={"title": "Collect payslips"})
    assert task.status_code == 201
    task_id = task.get_json()["data"]["id"]

    moved = client.patch(f"/api/tasks/{task_id}", json={"status": "DONE"})
    assert moved.get_json()["data"]["status"] == "DONE"

    bob = app.test_client()
    _login(bob, "u2", "bob@example.com", "Bob")
    assert bob.get(f"/api/projects/{project['id']}").status_code == 200
    assert bob.patch(f"/api/projects/{project['id']}", json={"name": "Hijack"}).status_code == 403

    carol = app.test_client()
    _login(carol, "u3", "carol@example.com", "Carol")
    assert carol.get(f"/api/projects/{project['id']}").status_code == 404
    assert carol.get(f"/api/projects/{project['id']}/tasks").status_code == 404

    assert client.delete(f"/api/tasks/{task_id}").status_code == 204
    assert client.delete(f"/api/projects/{project['id']}").status_code == 204


def test_projects_require_login(app):
    assert app.test_client().get("/api/projects").status_code == 401
