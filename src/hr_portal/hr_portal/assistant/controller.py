from __future__ import annotations

from flask import Flask, jsonify

from ..auth.principal import login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/assistant/chat", methods=["POST"], endpoint="api_assistant_chat")
    @login_required
    def chat():
        reply = container.assistant_service.reply(json_body().get("message"))
        return jsonify({"reply": reply})
