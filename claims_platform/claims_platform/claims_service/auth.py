from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol
import base64
import logging
import time
import jwt

from .models import Employee

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


class PasswordHasher(Protocol):
    def verify(self, secret: str, hash: str) -> bool: ...


class EmployeeLookup(Protocol):
    def find_by_email(self, email: str) -> Optional[Employee]: ...

    def find_by_employee_id(self, employee_id: str) -> Optional[Employee]: ...

    def save(self, employee: Employee) -> Employee: ...


class TokenStatus(str, Enum):
    VALID = "valid"
    MISSING_HEADER = "missing_header"
    BAD_SCHEME = "bad_scheme"
    EMPTY_TOKEN = "empty_token"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"
    MISSING_SUBJECT = "missing_subject"
    UNKNOWN_SUBJECT = "unknown_subject"
    LOOKUP_FAILED = "lookup_failed"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of checking a bearer token; employee is set only when valid."""

    status: TokenStatus
    employee: Optional[Employee] = None
    subject: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.VALID


def generate_employee_token(identifier: str) -> str:
    """
    Legacy opaque token: base64("<identifier>:<epoch millis>").

    NOT signed and NOT authoritative. It exists only for clients that still
    store the old format; the verifier never accepts it.
    """
    token_data = f"{identifier}:{int(time.time() * 1000)}"
    return base64.b64encode(token_data.encode("utf-8")).decode("ascii")


def validate_credentials(
    employee: Optional[Employee],
    raw_password: str,
    hasher: PasswordHasher = pwd_context,
) -> bool:
    """
    Check a raw password against the employee's stored hash.

    Returns True only when the hasher reports a match. Unknown employees still
    run a dummy verification so both paths cost roughly the same.
    """
    if employee is None or not employee.password:
        pwd_context.dummy_verify()
        return False
    try:
        return bool(hasher.verify(raw_password, employee.password))
    except (ValueError, TypeError) as e:
        # Stored value is not a hash the context recognises
        logger.warning("Credential check failed for employee_id=%s: %s", employee.employee_id, e)
        return False


class TokenVerifier:
    """
    Resolves bearer tokens to employees.

    Every failure collapses to False / None for the legacy callers; the
    verify_* methods expose the reason as a TokenStatus.
    """

    def __init__(
        self,
        repository: EmployeeLookup,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ):
        if not secret or not secret.strip():
            raise ValueError("A non-empty signing secret is required")
        self.repository = repository
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    # -------------------- Token issuance --------------------

    def create_access_token(self, email: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": email,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=self.expire_minutes)).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    # -------------------- Typed verification --------------------

    def verify_header(self, auth_header: Optional[str]) -> TokenVerification:
        if not auth_header:
            logger.info("[Verifier] Authorization header missing")
            return TokenVerification(TokenStatus.MISSING_HEADER)
        if not auth_header.startswith(BEARER_PREFIX):
            logger.info("[Verifier] Authorization header is not a bearer credential")
            return TokenVerification(TokenStatus.BAD_SCHEME)
        return self.verify_token(auth_header[len(BEARER_PREFIX):])

    def verify_token(self, token: Optional[str]) -> TokenVerification:
        token = (token or "").strip()
        if not token:
            logger.info("[Verifier] Token is empty")
            return TokenVerification(TokenStatus.EMPTY_TOKEN)

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("[Verifier] Token expired")
            return TokenVerification(TokenStatus.EXPIRED)
        except jwt.InvalidSignatureError:
            logger.warning("[Verifier] Token signature mismatch")
            return TokenVerification(TokenStatus.INVALID_SIGNATURE)
        except jwt.InvalidTokenError as e:
            logger.warning("[Verifier] Token malformed: %s", e)
            return TokenVerification(TokenStatus.MALFORMED)

        email = claims.get("sub")
        if not email or not isinstance(email, str):
            logger.warning("[Verifier] Token has no subject claim")
            return TokenVerification(TokenStatus.MISSING_SUBJECT)

        try:
            employee = self.repository.find_by_email(email)
        except Exception as e:
            logger.error("[Verifier] Employee lookup failed for %s: %s", email, e, exc_info=True)
            return TokenVerification(TokenStatus.LOOKUP_FAILED, subject=email)

        if employee is None:
            logger.info("[Verifier] Employee not found for email: %s", email)
            return TokenVerification(TokenStatus.UNKNOWN_SUBJECT, subject=email)

        return TokenVerification(TokenStatus.VALID, employee=employee, subject=email)

    # -------------------- Boolean / optional contract --------------------

    def is_employee(self, auth_header: Optional[str]) -> bool:
        return self.verify_header(auth_header).ok

    def employee_from_token(self, token: Optional[str]) -> Optional[Employee]:
        return self.verify_token(token).employee

    def employee_from_header(self, auth_header: Optional[str]) -> Optional[Employee]:
        return self.verify_header(auth_header).employee

    # -------------------- Registration and lookups --------------------

    def register(self, employee: Employee) -> Employee:
        """
        Persist a new employee. The password must already be hashed.
        """
        saved = self.repository.save(employee)
        logger.info("Registered employee: id=%s, employee_id=%s", saved.id, saved.employee_id)
        return saved

    def find_by_email(self, email: str) -> Optional[Employee]:
        return self.repository.find_by_email(email)

    def find_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        return self.repository.find_by_employee_id(employee_id)
