from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Text, Index
from datetime import datetime
from .db import Base
from sqlalchemy.orm import relationship


class Employee(Base):
    __tablename__ = "employees"
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    password = Column(String, nullable=False)

    claims = relationship("Claim", back_populates="employee", cascade="all, delete-orphan")
    queries = relationship("EmployeeQuery", back_populates="employee", cascade="all, delete-orphan")


class Hr(Base):
    __tablename__ = "hrs"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)

    claims = relationship("Claim", back_populates="assigned_hr")


class Policy(Base):
    __tablename__ = "policies"
    id = Column(Integer, primary_key=True, index=True)
    policy_name = Column(String, unique=True, nullable=False)


class Claim(Base):
    __tablename__ = "claims"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    status = Column(String, default="Pending", nullable=False)
    amount = Column(Float, nullable=False)
    claim_date = Column(DateTime, default=datetime.utcnow, nullable=True)
    remarks = Column(Text, nullable=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    policy_id = Column(Integer, ForeignKey("policies.id"), nullable=True)
    assigned_hr_id = Column(Integer, ForeignKey("hrs.id"), nullable=True)

    employee = relationship("Employee", back_populates="claims")
    policy = relationship("Policy")
    assigned_hr = relationship("Hr", back_populates="claims")

    __table_args__ = (
        Index("ix_claims_employee_id", "employee_id"),
        Index("ix_claims_assigned_hr_id", "assigned_hr_id"),
    )


class EmployeeQuery(Base):
    __tablename__ = "employee_queries"
    id = Column(Integer, primary_key=True, index=True)
    query_text = Column(Text, nullable=False)
    response = Column(Text, nullable=True)
    policy_name = Column(String, nullable=True)
    claim_type = Column(String, nullable=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    responded_at = Column(DateTime, nullable=True)

    employee = relationship("Employee", back_populates="queries")

    __table_args__ = (
        Index("ix_employee_queries_employee_id", "employee_id"),
    )
