"""
claims_service package

This package contains the backend logic for the InsurAi claims service.
It includes:

- FastAPI application (`main.py`) and routers (`routes/`)
- SQLAlchemy models, database integration and the employee repository
  (`models.py`, `db.py`, `repository.py`)
- Token verification and credential checks (`auth.py`)
- Claim and query email notifications (`notifications.py`, `mail.py`)

Used as the entry point for the claims microservice in the platform.
"""
