def test_employee_crud_over_http(client):
    created = client.post(
        "/api/employees",
        json={"employeeId": "EMP-7", "name": "Eve", "joiningDate": "2024-01-15", "basicSalary": 3000},
    )
    assert created.status_code == 201
    employee_id = created.get_json()["id"]

    listed = client.get("/api/employees").get_json()["data"]
    assert "EMP-7" in [e["employeeId"] for e in listed]

    updated = client.put(
        f"/api/employees/{employee_id}",
        json={"employeeId": "EMP-7", "name": "Eve Ho", "joiningDate": "2024-01-15", "basicSalary": 3100},
    )
    assert updated.get_json()["name"] == "Eve Ho"

    assert client.delete(f"/api/employees/{employee_id}").status_code == 204
    assert client.get(f"/api/employees/{employee_id}").status_code == 404


def test_employee_with_salary_cannot_be_deleted(client):
    client.post("/api/salaries", json={"employeeId": "E1", "month": 2, "year": 2025, "basicSalary": 100})

    resp = client.delete("/api/employees/E1")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "Employee still has salary records"
