from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.principal import current_principal
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.project_service

    @app.route("/api/projects", methods=["GET"], endpoint="api_projects_list")
    def list_projects():
        result = service.list_projects(current_principal(), page=request.args.get("page"), limit=request.args.get("limit"))
        return jsonify({"data": [p.to_dict() for p in result.items], "pagination": result.pagination()})

    @app.route("/api/projects", methods=["POST"], endpoint="api_projects_create")
    def create_project():
        project = service.create_project(current_principal(), json_body())
        return jsonify({"data": project.to_dict()}), 201

    @app.route("/api/projects/<project_id>", methods=["GET"], endpoint="api_projects_get")
    def get_project(project_id: str):
        return jsonify({"data": service.get_project(current_principal(), project_id).to_dict()})

    @app.route("/api/projects/<project_id>", methods=["PATCH"], endpoint="api_projects_update")
    def update_project(project_id: str):
        project = service.update_project(current_principal(), project_id, json_body())
        return jsonify({"data": project.to_dict()})

    @app.route("/api/projects/<project_id>", methods=["DELETE"], endpoint="api_projects_delete")
    def delete_project(project_id: str):
        service.delete_project(current_principal(), project_id)
        return "", 204
