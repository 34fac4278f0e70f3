"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

ALL_CLASSROOMS = "all"
UNKNOWN_CLASSROOM = "Unknown Classroom"
UNKNOWN_SUBJECT = "Unknown Subject"

CSV_HEADERS = ("Date", "Classroom", "Student Name", "Roll Number", "Email", "Status")
CSV_MIMETYPE = "text/csv;charset=utf-8"
CSV_FILENAME_PREFIX = "attendance_history"

SESSION_TIME_FORMAT = "%H:%M"
DEFAULT_STUDENT_COUNT_WORKERS = 4
