"""HR Portal package.

This package is organized by feature modules (users, attendance, leaves,
holidays, payroll) with a thin Flask JSON controller layer and
service/repository layers underneath.
"""
