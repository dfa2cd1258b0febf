"""
Unit tests for claim and query email notifications.
"""
from datetime import datetime
from unittest.mock import Mock

import pytest

from claims_platform.claims_platform.claims_service.mail import MailDeliveryError
from claims_platform.claims_platform.claims_service.models import Claim, Employee, EmployeeQuery, Hr, Policy
from claims_platform.claims_platform.claims_service.notifications import (
    APPROVED_COLOR,
    REJECTED_COLOR,
    NotificationService,
    render_agent_response_email,
    render_claim_status_email,
    render_new_claim_assigned_email,
    render_query_to_agent_email,
)


@pytest.fixture
def employee():
    return Employee(id=3, employee_id="EMP-003", name="Alice Example", email="alice@example.com", password="x")


@pytest.fixture
def hr():
    return Hr(id=2, name="Harriet", email="harriet@insurai.example")


@pytest.fixture
def claim(employee, hr):
    return Claim(
        id=42,
        title="Hospitalisation",
        status="Approved",
        amount=1500.0,
        claim_date=datetime(2025, 3, 5, 14, 30),
        remarks=None,
        employee=employee,
        assigned_hr=hr,
        policy=Policy(id=1, policy_name="Gold Health"),
    )


@pytest.fixture
def query(employee):
    return EmployeeQuery(
        id=9,
        query_text="Is dental covered?",
        response="Yes, up to the annual limit.",
        policy_name="Gold Health",
        claim_type="Dental",
        employee=employee,
    )


@pytest.fixture
def transport():
    return Mock()


def test_claim_status_email_content(claim):
    email = render_claim_status_email(claim)

    assert email.subject == "InsurAi: Claim #42 Approved"
    assert "Dear Alice Example," in email.html_body
    assert "<tr><th>Claim ID</th><td>42</td></tr>" in email.html_body
    assert "<tr><th>Policy</th><td>Gold Health</td></tr>" in email.html_body
    assert "<tr><th>Amount</th><td>₹1500.0</td></tr>" in email.html_body
    assert "<tr><th>Claim Date</th><td>05 Mar 2025 02:30 PM</td></tr>" in email.html_body
    assert "<tr><th>Assigned HR</th><td>Harriet</td></tr>" in email.html_body
    assert APPROVED_COLOR in email.html_body
    assert "Your claim has been Approved." in email.text_body


def test_claim_status_email_without_remarks_omits_row(claim):
    claim.remarks = None
    assert "Remarks" not in render_claim_status_email(claim).html_body

    claim.remarks = ""
    assert "Remarks" not in render_claim_status_email(claim).html_body


def test_claim_status_email_with_remarks_shows_row(claim):
    claim.remarks = "Receipts verified"

    email = render_claim_status_email(claim)

    assert "<tr><th>Remarks</th><td>Receipts verified</td></tr>" in email.html_body
    assert "Remarks: Receipts verified" in email.text_body


def test_claim_status_email_escapes_user_fields(claim):
    claim.remarks = "<script>alert('x')</script>"
    claim.title = "Eye & Dental"

    html_body = render_claim_status_email(claim).html_body

    assert "<script>" not in html_body
    assert "&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;" in html_body
    assert "<td>Eye &amp; Dental</td>" in html_body


def test_claim_status_colour_depends_on_status(claim):
    claim.status = "approved"
    assert APPROVED_COLOR in render_claim_status_email(claim).html_body

    claim.status = "Rejected"
    html_body = render_claim_status_email(claim).html_body
    assert REJECTED_COLOR in html_body
    assert APPROVED_COLOR not in html_body


def test_claim_status_email_placeholders(claim):
    claim.policy = None
    claim.assigned_hr = None
    claim.claim_date = None
    claim.employee = None

    html_body = render_claim_status_email(claim).html_body

    assert "Dear Employee," in html_body
    assert "<tr><th>Policy</th><td>N/A</td></tr>" in html_body
    assert "<tr><th>Claim Date</th><td>N/A</td></tr>" in html_body
    assert "<tr><th>Assigned HR</th><td>Not yet assigned</td></tr>" in html_body


def test_new_claim_assigned_email(hr, claim):
    email = render_new_claim_assigned_email(hr, claim)

    assert email.subject == "InsurAi: New Claim Assigned - #42"
    assert "Dear Harriet," in email.html_body
    assert "<tr><th>Employee</th><td>Alice Example</td></tr>" in email.html_body
    assert "InsurAi HR Dashboard" in email.html_body


def test_new_claim_assigned_email_placeholders(claim):
    claim.employee = None

    html_body = render_new_claim_assigned_email(None, claim).html_body

    assert "Dear HR," in html_body
    assert "<tr><th>Employee</th><td>N/A</td></tr>" in html_body


def test_query_to_agent_email(query):
    email = render_query_to_agent_email(query)

    assert email.subject == "InsurAi: New Query from Employee #3"
    assert "A new query has been submitted by Alice Example." in email.html_body
    assert "<tr><th>Query Text</th><td>Is dental covered?</td></tr>" in email.html_body
    assert "<tr><th>Claim Type</th><td>Dental</td></tr>" in email.html_body


def test_query_to_agent_email_without_employee(query):
    query.employee = None

    email = render_query_to_agent_email(query)

    assert email.subject == "InsurAi: New Query from Employee #"
    assert "submitted by Employee." in email.html_body


def test_agent_response_email(query):
    email = render_agent_response_email(query)

    assert email.subject == "InsurAi: Response to Your Query #9"
    assert "<tr><th>Response</th><td>Yes, up to the annual limit.</td></tr>" in email.html_body
    assert "InsurAi Employee Dashboard" in email.html_body


def test_new_claim_assigned_email_escapes_names(hr, claim):
    hr.name = "<i>Harriet</i>"
    claim.employee.name = "Tom & Jerry"

    html_body = render_new_claim_assigned_email(hr, claim).html_body

    assert "<i>" not in html_body
    assert "Dear &lt;i&gt;Harriet&lt;/i&gt;," in html_body
    assert "<tr><th>Employee</th><td>Tom &amp; Jerry</td></tr>" in html_body


def test_query_to_agent_email_escapes_user_fields(query):
    query.query_text = "<b>urgent</b>"
    query.employee.name = "<img src=x>"

    html_body = render_query_to_agent_email(query).html_body

    assert "<b>urgent</b>" not in html_body
    assert "<img" not in html_body
    assert "<tr><th>Query Text</th><td>&lt;b&gt;urgent&lt;/b&gt;</td></tr>" in html_body
    assert "submitted by &lt;img src=x&gt;." in html_body


def test_agent_response_email_escapes_response(query):
    query.response = "<script>alert(1)</script>"

    html_body = render_agent_response_email(query).html_body

    assert "<script>" not in html_body
    assert "<tr><th>Response</th><td>&lt;script&gt;alert(1)&lt;/script&gt;</td></tr>" in html_body


def test_service_hands_rendered_message_to_transport(transport, claim):
    NotificationService(transport).send_claim_status_email("alice@example.com", claim)

    transport.send.assert_called_once()
    to, subject, html_body, text_body = transport.send.call_args.args
    assert to == "alice@example.com"
    assert subject == "InsurAi: Claim #42 Approved"
    assert html_body.startswith("<!DOCTYPE html>")
    assert "Claim ID: 42" in text_body


def test_each_entry_point_sends_once(transport, hr, claim, query):
    service = NotificationService(transport)

    service.send_claim_status_email("alice@example.com", claim)
    service.send_new_claim_assigned_to_hr("harriet@insurai.example", hr, claim)
    service.send_employee_query_to_agent("agents@insurai.example", query)
    service.send_agent_response_to_employee("alice@example.com", query)

    recipients = [c.args[0] for c in transport.send.call_args_list]
    assert recipients == [
        "alice@example.com",
        "harriet@insurai.example",
        "agents@insurai.example",
        "alice@example.com",
    ]


def test_transport_failure_is_swallowed_and_logged(transport, claim, query, caplog):
    transport.send.side_effect = MailDeliveryError("SMTP down")
    service = NotificationService(transport)

    service.send_claim_status_email("alice@example.com", claim)
    service.send_agent_response_to_employee("alice@example.com", query)

    assert transport.send.call_count == 2
    assert "Failed to send claim status email (Claim #42)" in caplog.text
    assert "SMTP down" in caplog.text


def test_render_failure_is_swallowed(transport):
    broken = Mock(spec=["id"])
    broken.id = 5

    NotificationService(transport).send_claim_status_email("alice@example.com", broken)

    transport.send.assert_not_called()


def test_deferred_delivery_runs_later(transport, claim):
    deferred = []
    service = NotificationService(transport, defer=lambda fn, *args: deferred.append((fn, args)))

    service.send_claim_status_email("alice@example.com", claim)

    transport.send.assert_not_called()
    assert len(deferred) == 1
    fn, args = deferred[0]
    fn(*args)
    transport.send.assert_called_once()
