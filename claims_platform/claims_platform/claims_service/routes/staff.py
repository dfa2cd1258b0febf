"""
Staff Router - HR and agent actions that notify the employee.

Guarded by the X-Staff-Key header rather than employee tokens.
"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_notifier, require_staff
from ..models import Claim, EmployeeQuery
from ..notifications import NotificationService
from ..schemas import ClaimResponse, ClaimStatusUpdate, QueryAnswer, QueryResponse

router = APIRouter(prefix="/staff", tags=["staff"], dependencies=[Depends(require_staff)])
logger = logging.getLogger(__name__)


@router.patch("/claims/{claim_id}/status", response_model=ClaimResponse)
def update_claim_status(
    claim_id: int,
    payload: ClaimStatusUpdate,
    notifier: NotificationService = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    claim = db.query(Claim).filter(Claim.id == claim_id).first()
    if not claim:
        raise HTTPException(status_code=404, detail="Claim not found")

    previous = claim.status
    claim.status = payload.status
    if payload.remarks is not None:
        claim.remarks = payload.remarks
    db.add(claim)
    db.commit()
    db.refresh(claim)

    logger.info("Claim status changed: claim_id=%s, %s -> %s", claim.id, previous, claim.status)

    # Email is a side effect; the status change stands whatever happens to it
    notifier.send_claim_status_email(claim.employee.email, claim)
    return claim


@router.post("/queries/{query_id}/respond", response_model=QueryResponse)
def respond_to_query(
    query_id: int,
    payload: QueryAnswer,
    notifier: NotificationService = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    query = db.query(EmployeeQuery).filter(EmployeeQuery.id == query_id).first()
    if not query:
        raise HTTPException(status_code=404, detail="Query not found")

    query.response = payload.response
    query.responded_at = datetime.utcnow()
    db.add(query)
    db.commit()
    db.refresh(query)

    logger.info("Query answered: query_id=%s", query.id)

    notifier.send_agent_response_to_employee(query.employee.email, query)
    return query
