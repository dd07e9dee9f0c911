from __future__ import annotations

from flask import Flask, request

from ..common.http import api_endpoint, json_body, success
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @api_endpoint
    def list_employees():
        page = service.list(request.args)
        return success([e.to_dict() for e in page.items], pagination=page.pagination)

    @app.route("/api/employees/stats", methods=["GET"], endpoint="employee_stats")
    @api_endpoint
    def employee_stats():
        return success(container.stats_service.dashboard().to_dict())

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="get_employee")
    @api_endpoint
    def get_employee(employee_id: str):
        return success(service.get_summary(employee_id).to_dict())

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @api_endpoint
    def create_employee():
        employee = service.create(json_body())
        return success(employee.to_dict(), message="Employee created successfully", status=201)

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="update_employee")
    @api_endpoint
    def update_employee(employee_id: str):
        employee = service.update(employee_id, json_body())
        return success(employee.to_dict(), message="Employee updated successfully")

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @api_endpoint
    def delete_employee(employee_id: str):
        service.delete(employee_id)
        return success(message="Employee and related attendance records deleted successfully")
