from __future__ import annotations

import logging

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import STORE_UNAVAILABLE, json_error, login_required, request_data
from ..container import Container
from ..core.constants import SESSION_TIME_FORMAT, UNKNOWN_CLASSROOM, UNKNOWN_SUBJECT
from ..core.exceptions import AuthorizationError, EmptyExportError, NotFoundError, StoreError, ValidationError
from .model import SessionSummary

logger = logging.getLogger(__name__)


def _session_payload(session: SessionSummary) -> dict:
    stats = session.stats
    return {
        "date": session.date.strftime("%Y-%m-%d"),
        "time": session.time,
        "classroom_id": session.classroom_id,
        "classroom_name": session.classroom.name if session.classroom else UNKNOWN_CLASSROOM,
        "classroom_subject": session.classroom.subject if session.classroom else UNKNOWN_SUBJECT,
        "stats": {"present": stats.present, "absent": stats.absent, "total": stats.total},
        "students": [
            {
                "roll": r.student_roll,
                "name": r.student_name,
                "email": r.student_email,
                "status": r.status,
            }
            for r in session.records
        ],
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/capture/<classroom_id>", methods=["GET"], endpoint="capture_sheet")
    @login_required(container)
    def capture_sheet(classroom_id: str):
        try:
            sheet = container.attendance_service.marking_sheet(g.user, classroom_id)
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except StoreError:
            logger.exception("Marking sheet load failed for classroom %s", classroom_id)
            return json_error(STORE_UNAVAILABLE, 503)

        now = now_local()
        return jsonify(
            {
                "classroom": sheet.classroom.as_dict(),
                "students": [s.as_dict() for s in sheet.students],
                "default_date": now.strftime("%Y-%m-%d"),
                "default_time": now.strftime(SESSION_TIME_FORMAT),
            }
        )

    @app.route("/capture/<classroom_id>", methods=["POST"], endpoint="capture_submit")
    @login_required(container)
    def capture_submit(classroom_id: str):
        data = request_data()
        marks = data.get("marks") or {}
        if not isinstance(marks, dict):
            return json_error("marks must map roll numbers to 'present' or 'absent'", 400)

        try:
            created = container.attendance_service.submit_session(
                g.user,
                classroom_id,
                session_date=data.get("date", ""),
                session_time=data.get("time", ""),
                marks=marks,
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except StoreError:
            logger.exception("Attendance submit failed for classroom %s", classroom_id)
            return json_error("Failed to save attendance. Please try again.", 502)
        return jsonify({"success": True, "saved": len(created)}), 201

    @app.route("/history", endpoint="history")
    @login_required(container)
    def history():
        selection = request.args.get("classroom") or None
        try:
            view = container.attendance_service.history(g.user, selection=selection)
        except StoreError:
            logger.exception("History load failed")
            return json_error(STORE_UNAVAILABLE, 503)

        return jsonify(
            {
                "selection": view.selection,
                "classrooms": [c.as_dict() for c in view.classrooms],
                "overview": {
                    "total_sessions": view.overview.total_sessions,
                    "total_present": view.overview.total_present,
                    "total_absent": view.overview.total_absent,
                },
                "sessions": [_session_payload(s) for s in view.sessions],
            }
        )

    @app.route("/history.csv", endpoint="history_csv")
    @login_required(container)
    def history_csv():
        selection = request.args.get("classroom") or None
        try:
            export = container.attendance_service.export_csv(g.user, selection=selection)
        except EmptyExportError as e:
            return json_error(str(e), 400, alert=str(e))
        except StoreError:
            logger.exception("CSV export failed")
            return json_error(STORE_UNAVAILABLE, 503)

        return app.response_class(
            export.content.encode("utf-8"),
            mimetype=export.mimetype,
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )
