"""
Employee persistence lookups used by the token verifier and the HTTP layer.
"""
from typing import Optional
from sqlalchemy.orm import Session

from .models import Employee


class EmployeeRepository:
    """Thin wrapper over a SQLAlchemy session for Employee records."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.email == email).first()

    def find_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.employee_id == employee_id).first()

    def save(self, employee: Employee) -> Employee:
        self.db.add(employee)
        self.db.commit()
        self.db.refresh(employee)
        return employee
