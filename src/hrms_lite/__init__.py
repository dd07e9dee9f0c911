"""HRMS Lite package.

Employee records and daily attendance, organized by feature modules
(employees, attendance, stats) with a thin Flask controller layer over
service/repository layers. ``client`` holds the HTTP client and data cache
used by front-ends.
"""
