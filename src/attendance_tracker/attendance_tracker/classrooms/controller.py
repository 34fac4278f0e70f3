from __future__ import annotations

import logging

from flask import Flask, g, jsonify, url_for

from ..common.web import STORE_UNAVAILABLE, json_error, login_required, request_data
from ..container import Container
from ..core.exceptions import AuthorizationError, NotFoundError, StoreError, ValidationError
from .model import DashboardView

logger = logging.getLogger(__name__)

DELETE_FAILED = "Failed to delete classroom. Please try again."


def _dashboard_payload(view: DashboardView) -> dict:
    return {
        "user": g.user.as_dict(),
        "classrooms": [
            {
                **s.classroom.as_dict(),
                "student_count": s.student_count,
                "capture_url": url_for("capture_sheet", classroom_id=s.classroom.id),
                "students_url": url_for("classroom_students", classroom_id=s.classroom.id),
            }
            for s in view.classrooms
        ],
        "stats": {
            "total_classrooms": view.total_classrooms,
            "total_students": view.total_students,
            "distinct_subjects": view.distinct_subjects,
        },
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    @app.route("/dashboard", endpoint="dashboard")
    @login_required(container)
    def dashboard():
        try:
            view = container.classroom_service.dashboard(g.user)
        except StoreError:
            logger.exception("Dashboard load failed")
            return json_error(STORE_UNAVAILABLE, 503)
        return jsonify(_dashboard_payload(view))

    @app.route("/classrooms", methods=["POST"], endpoint="create_classroom")
    @login_required(container)
    def create_classroom():
        data = request_data()
        try:
            classroom = container.classroom_service.create_classroom(
                g.user,
                name=data.get("name", ""),
                subject=data.get("subject", ""),
                description=data.get("description"),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except StoreError:
            logger.exception("Classroom create failed")
            return json_error("Failed to create classroom. Please try again.", 502)
        return jsonify({"success": True, "classroom": classroom.as_dict()}), 201

    @app.route("/classrooms/<classroom_id>/delete", methods=["POST"], endpoint="delete_classroom")
    @login_required(container)
    def delete_classroom(classroom_id: str):
        try:
            view = container.classroom_service.delete_classroom(g.user, classroom_id)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except StoreError:
            logger.exception("Classroom delete failed for %s", classroom_id)
            return json_error(DELETE_FAILED, 502, alert=DELETE_FAILED)
        return jsonify({"success": True, **_dashboard_payload(view)})
