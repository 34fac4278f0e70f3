"""Attendance Tracker package.

Feature modules (users, classrooms, students, attendance) each carry a model,
a service and a thin Flask controller; persistence goes through the generic
entity stores in ``store``.
"""
