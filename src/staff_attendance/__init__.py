"""Staff Attendance package.

Role-based attendance and leave management for university staff, organized
by feature modules (users, attendance, leaves, dashboards, ...) with a thin
Flask JSON controller layer over service and repository layers.
"""
