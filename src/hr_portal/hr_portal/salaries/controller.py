from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.principal import login_required
from ..common.http import json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.salary_service

    @app.route("/api/salaries", methods=["GET"], endpoint="api_salaries_list")
    @login_required
    def list_salaries():
        args = request.args
        result = service.list_records(
            employee_id=args.get("employeeId"),
            month=args.get("month"),
            year=args.get("year"),
            page=args.get("page"),
            limit=args.get("limit"),
        )
        return jsonify({"data": [r.to_dict() for r in result.items], "pagination": result.pagination()})

    @app.route("/api/salaries", methods=["POST"], endpoint="api_salaries_create")
    @login_required
    def create_salary():
        record = service.create_record(json_body())
        return jsonify(record.to_dict()), 201

    @app.route("/api/salaries/<record_id>", methods=["GET"], endpoint="api_salaries_get")
    @login_required
    def get_salary(record_id: str):
        return jsonify(service.get_record(record_id).to_dict())

    @app.route("/api/salaries", methods=["PATCH"], endpoint="api_salaries_update")
    @login_required
    def update_salary():
        data = json_body()
        record_id = data.get("id")
        if not isinstance(record_id, str) or not record_id.strip():
            raise ValidationError("Record ID is required", details={"id": "Record ID is required"})
        record = service.update_record(record_id.strip(), data)
        return jsonify(record.to_dict())

    @app.route("/api/salaries", methods=["DELETE"], endpoint="api_salaries_delete")
    @login_required
    def delete_salary():
        record_id = (request.args.get("id") or "").strip()
        if not record_id:
            raise ValidationError("Record ID is required", details={"id": "Record ID is required"})
        service.delete_record(record_id)
        return jsonify({"success": True})
