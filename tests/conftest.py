from __future__ import annotations

import os
from datetime import datetime

import pytest

os.environ["APP_ENV"] = "testing"

from src.attendance_tracker.attendance_tracker.container import build_memory_container
from src.attendance_tracker.attendance_tracker.main import create_app
from src.attendance_tracker.attendance_tracker.users.model import User


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 1, 9, 0, 0)


@pytest.fixture
def container():
    return build_memory_container(student_count_workers=2)


@pytest.fixture
def teacher(container) -> User:
    return container.user_service.create_teacher(email="asha@example.com", full_name="Asha Rao", password="secret123")


@pytest.fixture
def other_teacher(container) -> User:
    return container.user_service.create_teacher(email="omar@example.com", full_name="Omar Ali", password="secret123")


@pytest.fixture
def app(container):
    app = create_app(container=container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client, teacher):
    resp = client.post("/login", json={"email": teacher.email, "password": "secret123"})
    assert resp.status_code == 200
    return client
