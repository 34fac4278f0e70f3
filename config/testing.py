import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker_test"),
}

STORE_BACKEND = "memory"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STUDENT_COUNT_WORKERS = 2

AUTO_INIT_DB = False
AUTO_SEED_DB = True

DEMO_TEACHER_EMAIL = "teacher@example.com"
DEMO_TEACHER_NAME = "Demo Teacher"
DEMO_TEACHER_PASSWORD = "teacher123"
