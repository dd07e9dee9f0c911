from __future__ import annotations

from datetime import datetime, timezone

from flask import Flask

from ..common.http import failure, success
from ..container import Container

API_VERSION = "1.0.0"

ENDPOINTS = {
    "employees": {
        "GET /api/employees": "Get all employees with pagination",
        "GET /api/employees/:id": "Get employee by ID with attendance summary",
        "POST /api/employees": "Create new employee",
        "PUT /api/employees/:id": "Update employee by ID",
        "DELETE /api/employees/:id": "Delete employee and its attendance records",
        "GET /api/employees/stats": "Get dashboard counters",
    },
    "attendance": {
        "GET /api/attendance": "Get attendance records with filtering",
        "GET /api/attendance/:id": "Get attendance record by ID",
        "POST /api/attendance": "Mark attendance for an employee (create or update the day)",
        "PUT /api/attendance/:id": "Change the status of an attendance record",
        "DELETE /api/attendance/:id": "Delete attendance record",
        "GET /api/attendance/stats": "Get attendance statistics",
        "GET /api/attendance/today": "Get today's attendance records",
    },
}


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def health():
        body = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": app.config.get("ENVIRONMENT"),
        }
        if container.conn is not None:
            body["database"] = "up" if container.conn.ping() else "down"
        return success(body, message="HRMS Lite API is running")

    @app.route("/", methods=["GET"], endpoint="welcome")
    def welcome():
        return success(
            {
                "version": API_VERSION,
                "documentation": "/api/docs",
                "endpoints": {"employees": "/api/employees", "attendance": "/api/attendance", "health": "/health"},
            },
            message="Welcome to HRMS Lite API",
        )

    @app.route("/api/docs", methods=["GET"], endpoint="api_docs")
    def api_docs():
        return success({"version": API_VERSION, "endpoints": ENDPOINTS}, message="HRMS Lite API Documentation")

    @app.errorhandler(404)
    def not_found(_e):
        return failure("Route not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return failure("Method not allowed", 405)
