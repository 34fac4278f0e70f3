from __future__ import annotations

import io

from src.attendance_tracker.attendance_tracker.attendance import controller as attendance_controller
from src.attendance_tracker.attendance_tracker.attendance import service as attendance_service
from src.attendance_tracker.attendance_tracker.core.exceptions import StoreError


def make_classroom(client, name="Math A", subject="Math"):
    resp = client.post("/classrooms", json={"name": name, "subject": subject})
    assert resp.status_code == 201
    return resp.get_json()["classroom"]


def test_protected_pages_answer_401_with_login_url(client):
    resp = client.get("/history?classroom=c1")

    assert resp.status_code == 401
    body = resp.get_json()
    assert body["success"] is False
    assert body["login_url"].startswith("/login?next=")


def test_login_redirects_to_safe_next(client, teacher):
    resp = client.post("/login", data={"email": teacher.email, "password": "secret123", "next": "/history"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/history")


def test_login_ignores_offsite_next(client, teacher):
    resp = client.post(
        "/login", json={"email": teacher.email, "password": "secret123", "next": "https://evil.example.com/"}
    )

    assert resp.status_code == 200
    assert resp.get_json()["user"]["email"] == teacher.email


def test_login_rejects_bad_password(client, teacher):
    resp = client.post("/login", json={"email": teacher.email, "password": "nope"})
    assert resp.status_code == 401


def test_logout_clears_session(logged_in):
    assert logged_in.get("/me").status_code == 200

    resp = logged_in.post("/logout")
    assert resp.status_code == 302
    assert logged_in.get("/me").status_code == 401


def test_dashboard_lists_classrooms_with_counts(logged_in):
    math = make_classroom(logged_in)
    make_classroom(logged_in, name="Math B", subject="math")
    logged_in.post(f"/classrooms/{math['id']}/students", json={"name": "Ravi", "roll": "1"})
    logged_in.post(f"/classrooms/{math['id']}/students", json={"name": "Meera", "roll": "2"})

    body = logged_in.get("/dashboard").get_json()

    assert body["user"]["full_name"] == "Asha Rao"
    assert body["stats"] == {"total_classrooms": 2, "total_students": 2, "distinct_subjects": 2}
    card = next(c for c in body["classrooms"] if c["id"] == math["id"])
    assert card["student_count"] == 2
    assert card["capture_url"] == f"/capture/{math['id']}"


def test_create_classroom_validation_error(logged_in):
    resp = logged_in.post("/classrooms", json={"name": "", "subject": "Math"})
    assert resp.status_code == 400


def test_capture_history_and_export_flow(logged_in):
    math = make_classroom(logged_in)
    logged_in.post(
        f"/classrooms/{math['id']}/students/import",
        json={"csv": "name,roll,email\nAsha,7,a@x.com\n"},
    )

    sheet = logged_in.get(f"/capture/{math['id']}").get_json()
    assert [s["roll"] for s in sheet["students"]] == ["7"]

    resp = logged_in.post(
        f"/capture/{math['id']}", json={"date": "2024-03-01", "time": "09:00", "marks": {"7": "present"}}
    )
    assert resp.status_code == 201
    assert resp.get_json()["saved"] == 1

    history = logged_in.get(f"/history?classroom={math['id']}").get_json()
    assert history["overview"] == {"total_sessions": 1, "total_present": 1, "total_absent": 0}
    assert history["sessions"][0]["classroom_name"] == "Math A"
    assert history["sessions"][0]["stats"] == {"present": 1, "absent": 0, "total": 1}

    export = logged_in.get(f"/history.csv?classroom={math['id']}")
    assert export.status_code == 200
    assert export.mimetype == "text/csv"
    assert "charset=utf-8" in export.content_type
    assert f"attendance_history_{math['id']}_" in export.headers["Content-Disposition"]
    assert export.get_data(as_text=True) == (
        '"Date","Classroom","Student Name","Roll Number","Email","Status"\n'
        '"2024-03-01","Math A","Asha","7","a@x.com","present"'
    )


def test_export_with_no_records_is_refused(logged_in):
    resp = logged_in.get("/history.csv")

    assert resp.status_code == 400
    assert resp.get_json()["alert"] == "No data to export"


def test_delete_classroom_success_returns_refreshed_dashboard(logged_in):
    math = make_classroom(logged_in)
    art = make_classroom(logged_in, name="Art", subject="Art")

    resp = logged_in.post(f"/classrooms/{math['id']}/delete")

    assert resp.status_code == 200
    assert [c["id"] for c in resp.get_json()["classrooms"]] == [art["id"]]


def test_delete_classroom_failure_alerts_and_keeps_state(logged_in, container, monkeypatch):
    math = make_classroom(logged_in)

    def failing_delete(entity_id):
        raise StoreError("rejected")

    monkeypatch.setattr(container.classrooms, "delete", failing_delete)
    resp = logged_in.post(f"/classrooms/{math['id']}/delete")

    assert resp.status_code == 502
    assert resp.get_json()["alert"] == "Failed to delete classroom. Please try again."
    assert container.classrooms.get(math["id"]) is not None


def test_other_teachers_classroom_is_forbidden(logged_in, container, other_teacher):
    theirs = container.classroom_service.create_classroom(other_teacher, name="Bio", subject="Bio")

    assert logged_in.get(f"/capture/{theirs.id}").status_code == 403
    assert logged_in.post(f"/classrooms/{theirs.id}/delete").status_code == 403
    assert logged_in.get("/capture/unknown").status_code == 404


def test_store_outage_is_not_reported_as_logged_out(logged_in, container, monkeypatch):
    def broken(*args, **kwargs):
        raise StoreError("down")

    monkeypatch.setattr(container.attendance, "filter", broken)
    resp = logged_in.get("/history")

    assert resp.status_code == 503


def upload_roster(client, classroom_id, payload: bytes):
    return client.post(
        f"/classrooms/{classroom_id}/students/import",
        data={"file": (io.BytesIO(payload), "roster.csv")},
        content_type="multipart/form-data",
    )


def test_roster_upload_accepts_utf8_with_bom(logged_in):
    math = make_classroom(logged_in)

    resp = upload_roster(logged_in, math["id"], "\ufeffname,roll\nJosé,1\n".encode("utf-8"))

    assert resp.status_code == 201
    students = logged_in.get(f"/classrooms/{math['id']}/students").get_json()["students"]
    assert [s["name"] for s in students] == ["José"]


def test_roster_upload_rejects_other_encodings(logged_in):
    math = make_classroom(logged_in)

    resp = upload_roster(logged_in, math["id"], b"name,roll\nJos\xe9,1\n")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Roster file must be UTF-8 CSV"
    assert logged_in.get(f"/classrooms/{math['id']}/students").get_json()["students"] == []


def test_capture_sheet_defaults_to_current_time(logged_in, monkeypatch, fixed_now):
    monkeypatch.setattr(attendance_controller, "now_local", lambda: fixed_now)
    math = make_classroom(logged_in)

    sheet = logged_in.get(f"/capture/{math['id']}").get_json()

    assert (sheet["default_date"], sheet["default_time"]) == ("2024-03-01", "09:00")


def test_export_filename_uses_todays_date(logged_in, monkeypatch, fixed_now):
    monkeypatch.setattr(attendance_service, "now_local", lambda: fixed_now)
    math = make_classroom(logged_in)
    logged_in.post(f"/classrooms/{math['id']}/students", json={"name": "Ravi", "roll": "1"})
    logged_in.post(f"/capture/{math['id']}", json={"date": "2024-02-28", "time": "09:00", "marks": {"1": "absent"}})

    export = logged_in.get("/history.csv")

    assert export.headers["Content-Disposition"] == "attachment; filename=attendance_history_all_2024-03-01.csv"
