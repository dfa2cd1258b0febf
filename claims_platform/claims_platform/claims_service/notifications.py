"""
Transactional email notifications for claims and employee/agent queries.

Each send_* entry point renders a fixed HTML template from the record and
hands it to a mail transport. Delivery is fire-and-forget: failures are
logged and never raised to the caller. All record fields are HTML-escaped
before interpolation.
"""
from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Any, Callable, List, Optional, Tuple
import logging

from .mail import MailTransport
from .models import Claim, EmployeeQuery, Hr

logger = logging.getLogger(__name__)

# 12-hour clock with AM/PM, e.g. "05 Mar 2025 02:30 PM"
DATE_FORMAT = "%d %b %Y %I:%M %p"

APPROVED_COLOR = "#28a745"
REJECTED_COLOR = "#dc3545"

FOOTER_TEXT = "This is an automated message. Please do not reply."


@dataclass(frozen=True)
class RenderedEmail:
    """Rendered email payload."""

    subject: str
    html_body: str
    text_body: str


def _text(value) -> str:
    return escape("" if value is None else str(value))


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime(DATE_FORMAT) if value is not None else "N/A"


def _format_amount(amount) -> str:
    return f"₹{amount}"


def _render_page(
    *,
    header_color: str,
    heading: str,
    table_class: str,
    paragraphs: List[str],
    rows: List[Tuple[str, str]],
    closing: str,
    extra_css: str = "",
) -> str:
    """
    Assemble the shared layout. paragraphs and closing are trusted markup;
    row values must already be escaped.
    """
    style = (
        "body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }"
        f".header {{ background-color: {header_color}; color: white; padding: 15px; text-align: center; }}"
        ".content { margin: 20px; }"
        ".footer { margin: 20px; font-size: 0.85em; color: gray; }"
        f".{table_class} {{ border-collapse: collapse; width: 100%; margin-top: 15px; }}"
        f".{table_class} td, .{table_class} th {{ border: 1px solid #ddd; padding: 8px; }}"
        f".{table_class} th {{ background-color: #f2f2f2; text-align: left; }}"
        + extra_css
    )
    table = "".join(f"<tr><th>{label}</th><td>{value}</td></tr>" for label, value in rows)
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return (
        "<!DOCTYPE html><html><head><meta charset='UTF-8'>"
        f"<style>{style}</style></head><body>"
        f"<div class='header'><h2>{heading}</h2></div>"
        f"<div class='content'>{body}"
        f"<table class='{table_class}'>{table}</table>"
        f"<p>{closing}</p>"
        f"</div><div class='footer'>{FOOTER_TEXT}</div>"
        "</body></html>"
    )


def _render_text(greeting: str, intro: str, rows: List[Tuple[str, str]], closing: str) -> str:
    lines = [greeting, "", intro, ""]
    lines.extend(f"{label}: {'' if value is None else value}" for label, value in rows)
    lines.extend(["", closing, "", FOOTER_TEXT])
    return "\n".join(lines)


# ========================= Claim Notifications =========================

def render_claim_status_email(claim: Claim) -> RenderedEmail:
    status = claim.status or ""
    status_color = APPROVED_COLOR if status.lower() == "approved" else REJECTED_COLOR
    employee_name = claim.employee.name if claim.employee is not None else "Employee"
    hr_name = (
        claim.assigned_hr.name
        if claim.assigned_hr is not None and claim.assigned_hr.name
        else "Not yet assigned"
    )
    policy_name = claim.policy.policy_name if claim.policy is not None else "N/A"

    rows = [
        ("Claim ID", str(claim.id)),
        ("Type", claim.title),
        ("Policy", policy_name),
        ("Amount", _format_amount(claim.amount)),
        ("Claim Date", _format_date(claim.claim_date)),
        ("Assigned HR", hr_name),
    ]
    if claim.remarks:
        rows.append(("Remarks", claim.remarks))

    html_body = _render_page(
        header_color="#0d6efd",
        heading="InsurAi Notification",
        table_class="claim-details",
        paragraphs=[
            f"Dear {_text(employee_name)},",
            f"Your claim has been <span class='status'>{_text(status)}</span>.",
        ],
        rows=[(label, _text(value)) for label, value in rows],
        closing="Thank you for using <strong>InsurAi</strong>.",
        extra_css=f".status {{ font-weight: bold; color: {status_color}; }}",
    )
    text_body = _render_text(
        f"Dear {employee_name},",
        f"Your claim has been {status}.",
        rows,
        "Thank you for using InsurAi.",
    )
    return RenderedEmail(f"InsurAi: Claim #{claim.id} {status}", html_body, text_body)


def render_new_claim_assigned_email(hr: Optional[Hr], claim: Claim) -> RenderedEmail:
    hr_name = hr.name if hr is not None and hr.name else "HR"
    employee_name = claim.employee.name if claim.employee is not None else "N/A"

    rows = [
        ("Claim ID", str(claim.id)),
        ("Employee", employee_name),
        ("Type", claim.title),
        ("Amount", _format_amount(claim.amount)),
        ("Claim Date", _format_date(claim.claim_date)),
    ]

    html_body = _render_page(
        header_color="#198754",
        heading="New Claim Assigned",
        table_class="claim-details",
        paragraphs=[
            f"Dear {_text(hr_name)},",
            "A new claim has been assigned to you for review:",
        ],
        rows=[(label, _text(value)) for label, value in rows],
        closing="Please login to <strong>InsurAi HR Dashboard</strong> to take action.",
    )
    text_body = _render_text(
        f"Dear {hr_name},",
        "A new claim has been assigned to you for review:",
        rows,
        "Please login to InsurAi HR Dashboard to take action.",
    )
    return RenderedEmail(f"InsurAi: New Claim Assigned - #{claim.id}", html_body, text_body)


# ========================= Employee-Agent Query Notifications =========================

def render_query_to_agent_email(query: EmployeeQuery) -> RenderedEmail:
    employee = query.employee
    employee_name = employee.name if employee is not None else "Employee"
    employee_ref = str(employee.id) if employee is not None else ""

    rows = [
        ("Query ID", str(query.id)),
        ("Query Text", query.query_text),
        ("Policy", query.policy_name),
        ("Claim Type", query.claim_type),
    ]

    html_body = _render_page(
        header_color="#ff8800",
        heading="New Employee Query",
        table_class="query-details",
        paragraphs=[
            "Dear Agent,",
            f"A new query has been submitted by {_text(employee_name)}.",
        ],
        rows=[(label, _text(value)) for label, value in rows],
        closing="Please login to <strong>InsurAi Agent Dashboard</strong> to respond.",
    )
    text_body = _render_text(
        "Dear Agent,",
        f"A new query has been submitted by {employee_name}.",
        rows,
        "Please login to InsurAi Agent Dashboard to respond.",
    )
    return RenderedEmail(f"InsurAi: New Query from Employee #{employee_ref}", html_body, text_body)


def render_agent_response_email(query: EmployeeQuery) -> RenderedEmail:
    rows = [
        ("Query ID", str(query.id)),
        ("Query Text", query.query_text),
        ("Response", query.response),
        ("Policy", query.policy_name),
        ("Claim Type", query.claim_type),
    ]

    html_body = _render_page(
        header_color="#007bff",
        heading="Query Response",
        table_class="query-details",
        paragraphs=[
            "Dear Employee,",
            "Your query has been responded by the assigned agent.",
        ],
        rows=[(label, _text(value)) for label, value in rows],
        closing="Please login to <strong>InsurAi Employee Dashboard</strong> to view details.",
    )
    text_body = _render_text(
        "Dear Employee,",
        "Your query has been responded by the assigned agent.",
        rows,
        "Please login to InsurAi Employee Dashboard to view details.",
    )
    return RenderedEmail(f"InsurAi: Response to Your Query #{query.id}", html_body, text_body)


class NotificationService:
    """
    Sends the four business-event emails through a mail transport.

    Rendering happens immediately, in the caller's context, so lazy
    relationships are read while the session is still open. Delivery runs
    inline, or through ``defer`` (e.g. FastAPI's ``BackgroundTasks.add_task``)
    when one is given. Every failure is logged and swallowed; callers must
    not assume delivery happened.
    """

    def __init__(self, transport: MailTransport, defer: Optional[Callable[..., Any]] = None):
        self.transport = transport
        self.defer = defer

    def _dispatch(self, to: str, render: Callable[[], RenderedEmail], description: str) -> None:
        try:
            email = render()
        except Exception as e:
            logger.error("Failed to render %s: %s", description, e, exc_info=True)
            return

        if self.defer is not None:
            self.defer(self._deliver, to, email, description)
        else:
            self._deliver(to, email, description)

    def _deliver(self, to: str, email: RenderedEmail, description: str) -> None:
        try:
            self.transport.send(to, email.subject, email.html_body, email.text_body)
            logger.info("%s sent to %s", description, to)
        except Exception as e:
            logger.error("Failed to send %s to %s: %s", description, to, e, exc_info=True)

    def send_claim_status_email(self, to: str, claim: Claim) -> None:
        self._dispatch(
            to,
            lambda: render_claim_status_email(claim),
            f"claim status email (Claim #{getattr(claim, 'id', None)})",
        )

    def send_new_claim_assigned_to_hr(self, to: str, hr: Optional[Hr], claim: Claim) -> None:
        self._dispatch(
            to,
            lambda: render_new_claim_assigned_email(hr, claim),
            f"new claim assignment email (Claim #{getattr(claim, 'id', None)})",
        )

    def send_employee_query_to_agent(self, to: str, query: EmployeeQuery) -> None:
        self._dispatch(
            to,
            lambda: render_query_to_agent_email(query),
            f"new query notification (Query #{getattr(query, 'id', None)})",
        )

    def send_agent_response_to_employee(self, to: str, query: EmployeeQuery) -> None:
        self._dispatch(
            to,
            lambda: render_agent_response_email(query),
            f"agent response notification (Query #{getattr(query, 'id', None)})",
        )
