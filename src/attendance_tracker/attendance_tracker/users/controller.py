from __future__ import annotations

import logging

from flask import Flask, g, jsonify, redirect, request, url_for

from ..common.web import STORE_UNAVAILABLE, json_error, login_required, request_data
from ..container import Container
from ..core.exceptions import AuthenticationError, StoreError
from .identity import is_safe_redirect

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        next_url = request.values.get("next") or ""

        if request.method == "GET":
            try:
                user = container.identity.me()
                return jsonify({"authenticated": True, "user": user.as_dict()})
            except AuthenticationError:
                return jsonify({"authenticated": False, "next": next_url if is_safe_redirect(next_url) else None})
            except StoreError:
                logger.exception("Could not resolve the current user")
                return json_error(STORE_UNAVAILABLE, 503)

        data = request_data()
        next_url = data.get("next") or next_url
        try:
            user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except AuthenticationError as e:
            return json_error(str(e), 401)
        except StoreError:
            logger.exception("Login failed on the store")
            return json_error(STORE_UNAVAILABLE, 503)

        container.identity.login(user)
        logger.info("Teacher %s logged in", user.email)
        if is_safe_redirect(next_url):
            return redirect(next_url)
        return jsonify({"success": True, "user": user.as_dict()})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.identity.logout()
        return redirect(url_for("dashboard"))

    @app.route("/me", endpoint="me")
    @login_required(container)
    def me():
        return jsonify({"user": g.user.as_dict()})
