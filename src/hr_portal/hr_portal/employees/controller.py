from __future__ import annotations

from flask import Flask, jsonify

from ..auth.principal import current_principal
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees_list")
    def list_employees():
        employees = service.list_employees(current_principal())
        return jsonify({"data": [e.to_dict() for e in employees]})

    @app.route("/api/employees", methods=["POST"], endpoint="api_employees_create")
    def create_employee():
        employee = service.create_employee(current_principal(), json_body())
        return jsonify(employee.to_dict()), 201

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="api_employees_get")
    def get_employee(employee_id: str):
        return jsonify(service.get_employee(current_principal(), employee_id).to_dict())

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="api_employees_update")
    def update_employee(employee_id: str):
        employee = service.update_employee(current_principal(), employee_id, json_body())
        return jsonify(employee.to_dict())

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="api_employees_delete")
    def delete_employee(employee_id: str):
        service.delete_employee(current_principal(), employee_id)
        return "", 204
