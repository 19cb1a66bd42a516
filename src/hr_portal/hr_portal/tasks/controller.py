from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.principal import current_principal
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.task_service

    @app.route("/api/projects/<project_id>/tasks", methods=["GET"], endpoint="api_tasks_list")
    def list_tasks(project_id: str):
        tasks = service.list_tasks(
            current_principal(),
            project_id,
            status=request.args.get("status"),
            assignee_id=request.args.get("assigneeId"),
        )
        return jsonify({"data": [t.to_dict() for t in tasks]})

    @app.route("/api/projects/<project_id>/tasks", methods=["POST"], endpoint="api_tasks_create")
    def create_task(project_id: str):
        task = service.create_task(current_principal(), project_id, json_body())
        return jsonify({"data": task.to_dict()}), 201

    @app.route("/api/tasks/<task_id>", methods=["PATCH"], endpoint="api_tasks_update")
    def update_task(task_id: str):
        task = service.update_task(current_principal(), task_id, json_body())
        return jsonify({"data": task.to_dict()})

    @app.route("/api/tasks/<task_id>", methods=["DELETE"], endpoint="api_tasks_delete")
    def delete_task(task_id: str):
        service.delete_task(current_principal(), task_id)
        return "", 204
