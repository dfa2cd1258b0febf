from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from contextlib import asynccontextmanager
import logging

from .config import settings
from .db import init_db
from .deps import get_current_employee, get_verifier
from .models import Employee
from .schemas import (
    EmployeeCreate,
    EmployeeLogin,
    EmployeeResponse,
    RegistrationResponse,
    Token,
)
from .auth import TokenVerifier, hash_password, validate_credentials
from .routes import claims, queries, staff, health
from .utils.log_setup import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Configure logging and create tables on startup"""
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    init_db()
    yield


app = FastAPI(
    title="InsurAi Claims Service",
    description="Employee authentication and claim/query notifications",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(claims.router)
app.include_router(queries.router)
app.include_router(staff.router)
app.include_router(health.router)


@app.post("/employees/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register(payload: EmployeeCreate, verifier: TokenVerifier = Depends(get_verifier)):
    # Check if email or employee id already exists
    if verifier.find_by_email(payload.email):
        raise HTTPException(status_code=400, detail="Email already exists")
    if verifier.find_by_employee_id(payload.employee_id):
        raise HTTPException(status_code=400, detail="Employee ID already exists")

    employee = Employee(
        employee_id=payload.employee_id,
        name=payload.name,
        email=payload.email,
        password=hash_password(payload.password),
    )
    try:
        saved = verifier.register(employee)
    except IntegrityError as e:
        # Lost a race with a concurrent registration
        verifier.repository.db.rollback()
        raise HTTPException(status_code=400, detail="Employee already exists") from e

    return RegistrationResponse(
        employee=EmployeeResponse.model_validate(saved),
        access_token=verifier.create_access_token(saved.email),
    )


@app.post("/employees/login", response_model=Token)
def login(credentials: EmployeeLogin, verifier: TokenVerifier = Depends(get_verifier)):
    employee = verifier.find_by_email(credentials.email)
    if not validate_credentials(employee, credentials.password):
        logger.info("[Login] Failed login for email=%s", credentials.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    logger.info("[Login] Successful login: id=%s, employee_id=%s", employee.id, employee.employee_id)
    return Token(access_token=verifier.create_access_token(employee.email))


@app.get("/employees/me", response_model=EmployeeResponse)
def read_current_employee(employee: Employee = Depends(get_current_employee)):
    return employee


@app.get("/")
def root():
    return {
        "service": "InsurAi Claims Service",
        "version": "1.0.0",
        "status": "running"
    }
