"""HRIS package.

Feature modules (attendance, overtime, locations, shifts, employees, ...)
follow the same layering: dataclass models, Protocol repositories with MySQL
implementations, services holding the business rules and thin Flask
controllers on top.
"""
