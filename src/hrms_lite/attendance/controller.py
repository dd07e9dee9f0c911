from __future__ import annotations

from flask import Flask, request

from ..common.http import api_endpoint, json_body, success
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @api_endpoint
    def list_attendance():
        page = service.list(request.args)
        return success([r.to_dict() for r in page.items], pagination=page.pagination)

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @api_endpoint
    def attendance_stats():
        return success(container.stats_service.attendance_stats(request.args).to_dict())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="today_attendance")
    @api_endpoint
    def today_attendance():
        return success([r.to_dict() for r in service.today()])

    @app.route("/api/attendance/<attendance_id>", methods=["GET"], endpoint="get_attendance")
    @api_endpoint
    def get_attendance(attendance_id: str):
        return success(service.get(attendance_id).to_dict())

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @api_endpoint
    def mark_attendance():
        result = service.mark(json_body())
        message = "Attendance marked successfully" if result.created else "Attendance updated successfully"
        return success(result.record.to_dict(), message=message, status=201)

    @app.route("/api/attendance/<attendance_id>", methods=["PUT"], endpoint="update_attendance")
    @api_endpoint
    def update_attendance(attendance_id: str):
        record = service.update_status(attendance_id, json_body())
        return success(record.to_dict(), message="Attendance updated successfully")

    @app.route("/api/attendance/<attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @api_endpoint
    def delete_attendance(attendance_id: str):
        service.delete(attendance_id)
        return success(message="Attendance record deleted successfully")
