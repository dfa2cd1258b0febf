"""
Employee questions routed to the agent inbox.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..deps import get_current_employee, get_notifier
from ..models import Employee, EmployeeQuery
from ..notifications import NotificationService
from ..schemas import QueryCreate, QueryResponse

router = APIRouter(prefix="/queries", tags=["queries"])
logger = logging.getLogger(__name__)


@router.post("", response_model=QueryResponse, status_code=status.HTTP_201_CREATED)
def submit_query(
    payload: QueryCreate,
    employee: Employee = Depends(get_current_employee),
    notifier: NotificationService = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    query = EmployeeQuery(
        query_text=payload.query_text,
        policy_name=payload.policy_name,
        claim_type=payload.claim_type,
        employee_id=employee.id,
    )
    db.add(query)
    db.commit()
    db.refresh(query)

    logger.info("Query submitted: query_id=%s, employee_id=%s", query.id, employee.employee_id)

    if settings.AGENT_INBOX_EMAIL:
        notifier.send_employee_query_to_agent(settings.AGENT_INBOX_EMAIL, query)
    else:
        logger.warning("AGENT_INBOX_EMAIL not set; agent not notified of query %s", query.id)
    return query


@router.get("", response_model=list[QueryResponse])
def list_queries(employee: Employee = Depends(get_current_employee), db: Session = Depends(get_db)):
    return (
        db.query(EmployeeQuery)
        .filter(EmployeeQuery.employee_id == employee.id)
        .order_by(EmployeeQuery.created_at.desc(), EmployeeQuery.id.desc())
        .all()
    )
