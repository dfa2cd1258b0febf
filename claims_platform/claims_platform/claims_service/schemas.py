from pydantic import BaseModel, Field

from datetime import datetime
from typing import Optional


class EmployeeCreate(BaseModel):
    employee_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=8)


class EmployeeLogin(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class EmployeeResponse(BaseModel):
    id: int
    employee_id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class RegistrationResponse(BaseModel):
    employee: EmployeeResponse
    access_token: str
    token_type: str = "bearer"


# Claims
class ClaimCreate(BaseModel):
    title: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    policy_name: Optional[str] = None
    remarks: Optional[str] = None


class ClaimStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, pattern=r"^[^\r\n]+$")
    remarks: Optional[str] = None


class ClaimResponse(BaseModel):
    id: int
    title: str
    status: str
    amount: float
    claim_date: Optional[datetime] = None
    remarks: Optional[str] = None
    assigned_hr_id: Optional[int] = None

    class Config:
        from_attributes = True


# Employee/agent queries
class QueryCreate(BaseModel):
    query_text: str = Field(..., min_length=1)
    policy_name: Optional[str] = None
    claim_type: Optional[str] = None


class QueryAnswer(BaseModel):
    response: str = Field(..., min_length=1)


class QueryResponse(BaseModel):
    id: int
    query_text: str
    response: Optional[str] = None
    policy_name: Optional[str] = None
    claim_type: Optional[str] = None
    created_at: datetime
    responded_at: Optional[datetime] = None

    class Config:
        from_attributes = True
