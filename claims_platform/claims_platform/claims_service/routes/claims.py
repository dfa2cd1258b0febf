"""
Claim submission and listing for authenticated employees.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_employee, get_notifier
from ..models import Claim, Employee, Hr, Policy
from ..notifications import NotificationService
from ..schemas import ClaimCreate, ClaimResponse

router = APIRouter(prefix="/claims", tags=["claims"])
logger = logging.getLogger(__name__)


def pick_least_loaded_hr(db: Session) -> Optional[Hr]:
    """Return the HR with the fewest assigned claims, or None when no HR exists."""
    claim_count = func.count(Claim.id)
    row = (
        db.query(Hr, claim_count)
        .outerjoin(Claim, Claim.assigned_hr_id == Hr.id)
        .group_by(Hr.id)
        .order_by(claim_count.asc(), Hr.id.asc())
        .first()
    )
    return row[0] if row else None


def get_or_create_policy(db: Session, policy_name: Optional[str]) -> Optional[Policy]:
    if not policy_name:
        return None
    policy = db.query(Policy).filter(Policy.policy_name == policy_name).first()
    if policy is None:
        policy = Policy(policy_name=policy_name)
        db.add(policy)
        db.flush()
    return policy


@router.post("", response_model=ClaimResponse, status_code=status.HTTP_201_CREATED)
def submit_claim(
    payload: ClaimCreate,
    employee: Employee = Depends(get_current_employee),
    notifier: NotificationService = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    hr = pick_least_loaded_hr(db)
    claim = Claim(
        title=payload.title,
        amount=payload.amount,
        remarks=payload.remarks,
        status="Pending",
        claim_date=datetime.utcnow(),
        employee_id=employee.id,
        policy=get_or_create_policy(db, payload.policy_name),
        assigned_hr=hr,
    )
    db.add(claim)
    db.commit()
    db.refresh(claim)

    logger.info(
        "Claim submitted: claim_id=%s, employee_id=%s, assigned_hr_id=%s",
        claim.id, employee.employee_id, claim.assigned_hr_id
    )

    if hr is not None:
        notifier.send_new_claim_assigned_to_hr(hr.email, hr, claim)
    return claim


@router.get("", response_model=list[ClaimResponse])
def list_claims(employee: Employee = Depends(get_current_employee), db: Session = Depends(get_db)):
    return (
        db.query(Claim)
        .filter(Claim.employee_id == employee.id)
        .order_by(Claim.claim_date.desc(), Claim.id.desc())
        .all()
    )
