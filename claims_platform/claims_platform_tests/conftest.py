"""
Pytest configuration for claims service tests.

Settings are read at import time, so the environment is prepared here before
any test module imports the service.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-signing-secret-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_claims.db")
os.environ.setdefault("MAIL_BACKEND", "console")
os.environ.setdefault("AGENT_INBOX_EMAIL", "agents@insurai.example")
os.environ.setdefault("STAFF_API_KEY", "staff-test-key")

import pytest  # noqa: E402

from claims_platform.claims_platform.claims_service.db import Base, engine  # noqa: E402
from claims_platform.claims_platform.claims_service import models  # noqa: E402,F401


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
