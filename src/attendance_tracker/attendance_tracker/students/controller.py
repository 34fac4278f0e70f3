from __future__ import annotations

import logging

from flask import Flask, g, jsonify, request

from ..common.web import STORE_UNAVAILABLE, json_error, login_required, request_data
from ..container import Container
from ..core.exceptions import AuthorizationError, NotFoundError, StoreError, ValidationError

logger = logging.getLogger(__name__)

ROSTER_NOT_UTF8 = "Roster file must be UTF-8 CSV"


def register(app: Flask, container: Container) -> None:
    @app.route("/classrooms/<classroom_id>/students", methods=["GET", "POST"], endpoint="classroom_students")
    @login_required(container)
    def classroom_students(classroom_id: str):
        try:
            if request.method == "POST":
                data = request_data()
                student = container.student_service.add_student(
                    g.user,
                    classroom_id,
                    name=data.get("name", ""),
                    roll=data.get("roll", ""),
                    email=data.get("email"),
                )
                return jsonify({"success": True, "student": student.as_dict()}), 201

            students = container.student_service.list_for_classroom(g.user, classroom_id)
            return jsonify({"classroom_id": classroom_id, "students": [s.as_dict() for s in students]})
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except StoreError:
            logger.exception("Roster request failed for classroom %s", classroom_id)
            return json_error(STORE_UNAVAILABLE, 503)

    @app.route("/classrooms/<classroom_id>/students/import", methods=["POST"], endpoint="import_students")
    @login_required(container)
    def import_students(classroom_id: str):
        upload = request.files.get("file")
        if upload is not None:
            try:
                text = upload.read().decode("utf-8-sig")
            except UnicodeDecodeError:
                return json_error(ROSTER_NOT_UTF8, 400)
        else:
            text = request_data().get("csv", "")

        try:
            created = container.student_service.import_roster(g.user, classroom_id, text)
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except StoreError:
            logger.exception("Roster import failed for classroom %s", classroom_id)
            return json_error("Failed to import students. Please try again.", 502)
        return jsonify({"success": True, "imported": len(created)}), 201

    @app.route("/students/<student_id>/delete", methods=["POST"], endpoint="delete_student")
    @login_required(container)
    def delete_student(student_id: str):
        try:
            container.student_service.delete_student(g.user, student_id)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except StoreError:
            logger.exception("Student delete failed for %s", student_id)
            return json_error("Failed to delete student. Please try again.", 502)
        return jsonify({"success": True})
