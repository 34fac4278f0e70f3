import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

# "mysql" or "memory" (no database needed, data lost on restart)
STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

STUDENT_COUNT_WORKERS = int(os.getenv("STUDENT_COUNT_WORKERS", "4"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the demo teacher account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

DEMO_TEACHER_EMAIL = os.getenv("DEMO_TEACHER_EMAIL", "teacher@example.com")
DEMO_TEACHER_NAME = os.getenv("DEMO_TEACHER_NAME", "Demo Teacher")
DEMO_TEACHER_PASSWORD = os.getenv("DEMO_TEACHER_PASSWORD", "teacher123")
