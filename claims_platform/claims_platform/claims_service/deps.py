"""
FastAPI dependencies shared by the routers.
"""
import hmac
import logging
from typing import Optional

from fastapi import BackgroundTasks, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from .auth import TokenVerifier
from .config import settings
from .db import get_db
from .mail import MailTransport, build_mail_transport
from .models import Employee
from .notifications import NotificationService
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_transport: Optional[MailTransport] = None


def get_mail_transport() -> MailTransport:
    global _transport
    if _transport is None:
        _transport = build_mail_transport(settings)
    return _transport


def get_verifier(db: Session = Depends(get_db)) -> TokenVerifier:
    return TokenVerifier(
        EmployeeRepository(db),
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


def get_notifier(
    background_tasks: BackgroundTasks,
    transport: MailTransport = Depends(get_mail_transport),
) -> NotificationService:
    # Delivery runs after the response so business writes never wait on SMTP
    return NotificationService(transport, defer=background_tasks.add_task)


def get_current_employee(
    verifier: TokenVerifier = Depends(get_verifier),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Employee:
    result = verifier.verify_header(authorization)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result.employee


def require_staff(x_staff_key: Optional[str] = Header(default=None, alias="X-Staff-Key")) -> None:
    """
    Guard for HR/agent actions. Disabled entirely when STAFF_API_KEY is unset.
    """
    expected = settings.STAFF_API_KEY
    if not expected:
        logger.warning("Staff endpoint called but STAFF_API_KEY is not configured")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Staff access disabled")
    if not x_staff_key or not hmac.compare_digest(x_staff_key.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid staff key")
