from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.http import json_body
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from .principal import clear_principal, current_principal, store_principal


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        principal = container.auth_service.authenticate(data.get("email"), data.get("password"))

        session.permanent = bool(data.get("rememberMe"))
        store_principal(principal)
        return jsonify({"user": principal.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        clear_principal()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    def me():
        return jsonify({"user": current_principal().to_dict()})
